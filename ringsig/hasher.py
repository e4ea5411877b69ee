#!/usr/bin/env python3

# Copyright (C) 2024 The ringsig developers
#
# This file is part of ringsig. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ringsig including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Hash engine: the random oracle of the ring signature scheme.

A HashEngine pairs an elliptic curve group (of prime order n)
with a hash function and provides:

* hash_to_scalar: a digest of arbitrary bytes as an integer in [0, n-1]
* hash_sequence: a digest of a sequence of text strings, integers,
  and curve points as an integer in [0, n-1]
* hash_to_point: a curve point deterministically derived from another point
* shuffle: a deterministic Fisher-Yates shuffle driven by a seed

Scalars are obtained by rejection sampling, not by modular reduction:
the digest is hashed again until the resulting big-endian integer is
less than n. Modular reduction would bias small values.

The byte size of the digest must match the byte size of n,
otherwise rejection sampling becomes biased (or never terminates
in practice) and the resulting signatures leak the position
of the true signer in the ring: a mismatch is refused at construction.

Sequences are hashed through their canonical ASN.1 DER representation,
a SEQUENCE of:

* UTF8String for text strings (bytes or str, UTF-8 encoded)
* INTEGER for integers
* OCTET STRING holding the SEC 1 compressed representation for points
"""

import hashlib
from dataclasses import InitVar, dataclass
from typing import Dict, Iterable, List, Optional, Sequence, TypeVar

from btclib.ec import Curve, bytes_from_point, mult
from btclib.ec.curve import CURVES

from ringsig import der
from ringsig.alias import HashF, HashInput, Point, String
from ringsig.exceptions import (
    PointNotOnCurve,
    RingSigValueError,
    UnsupportedHashInput,
)
from ringsig.utils import bytes_from_string

T = TypeVar("T")


def is_point(Q: object) -> bool:
    "Return True if Q has the shape of an affine point: a tuple of two ints."
    return (
        isinstance(Q, tuple)
        and len(Q) == 2
        and all(isinstance(c, int) and not isinstance(c, bool) for c in Q)
    )


def point_on_curve(Q: Point, ec: Curve) -> bool:
    "Return True if Q is a finite affine point on the curve."

    if not is_point(Q):
        return False
    # the infinity point (y == 0) has no SEC 1 representation
    if not 0 <= Q[0] < ec.p or not 0 < Q[1] < ec.p:
        return False
    return bool(ec.is_on_curve(Q))


def require_point(Q: Point, ec: Curve) -> None:
    "Require Q to be a finite affine point on the curve."

    if not point_on_curve(Q, ec):
        raise PointNotOnCurve(f"point not on curve: {Q!r}")


def unbiased_index(value: int, bound: int, order: int) -> Optional[int]:
    """Return an index in [0, bound-1] from a value in [0, order-1].

    The value is rejected (None is returned) when it falls in the
    incomplete last block of size order % bound: accepted values are
    then equally distributed among the bound residue classes.
    """

    if value >= bound * (order // bound):
        return None
    return value % bound


@dataclass(frozen=True)
class HashEngine:
    """Curve group and hash function used for hashing.

    Two engines are equal when both the curve and the hash function are.
    Keys and signatures can be combined only if they share the same engine.
    """

    ec: Curve
    hf: HashF
    check_validity: InitVar[bool] = True

    def __post_init__(self, check_validity: bool) -> None:
        if check_validity:
            self.assert_valid()

    @property
    def n_size(self) -> int:
        "Return the byte size of the group order."
        return (self.ec.n.bit_length() + 7) // 8

    @property
    def p_size(self) -> int:
        "Return the byte size of the field elements."
        return (self.ec.p.bit_length() + 7) // 8

    def assert_valid(self) -> None:
        hf_len = self.hf().digest_size
        if hf_len != self.n_size:
            err_msg = f"hash function digest size ({hf_len} bytes) "
            err_msg += f"does not match the group order size ({self.n_size} bytes)"
            raise RingSigValueError(err_msg)

    def digest(self, data: bytes) -> bytes:
        h = self.hf()
        h.update(data)
        return bytes(h.digest())

    def hash_to_scalar(self, data: String) -> int:
        "Keep on hashing until an integer less than the group order is found."

        digest = bytes_from_string(data)
        while True:
            digest = self.digest(digest)
            i = int.from_bytes(digest, byteorder="big", signed=False)
            if i < self.ec.n:
                return i

    def _serialize_item(self, item: HashInput) -> bytes:
        if isinstance(item, (bytes, bytearray, str)):
            return der.serialize_utf8_string(bytes_from_string(item))
        # bool is an int subclass, but it is not an integer here
        if isinstance(item, int) and not isinstance(item, bool):
            return der.serialize_integer(item)
        if is_point(item):
            require_point(item, self.ec)  # type: ignore[arg-type]
            Q_bytes = bytes_from_point(item, self.ec, compressed=True)
            return der.serialize_octet_string(Q_bytes)
        raise UnsupportedHashInput(f"unsupported type: {type(item).__name__}")

    def serialize_sequence(self, items: Iterable[HashInput]) -> bytes:
        "Return the canonical DER SEQUENCE of the items."
        return der.serialize_sequence(self._serialize_item(item) for item in items)

    def hash_sequence(self, items: Iterable[HashInput]) -> int:
        "Hash the canonical DER SEQUENCE of the items to a scalar."
        return self.hash_to_scalar(self.serialize_sequence(items))

    def hash_to_point(self, Q: Point) -> Point:
        """Hash a point to another point: G * hash_sequence([x_Q, y_Q]).

        The result lies in the subgroup generated by G and its
        discrete logarithm is known to anyone: it is not a general
        hash-to-curve, but it is only used as a base point
        for the key image and its commitments.
        """

        require_point(Q, self.ec)
        return mult(self.hash_sequence(Q), self.ec.G, self.ec)

    def shuffle(self, items: Sequence[T], seed: int) -> List[T]:
        """Return a new list with the items deterministically shuffled.

        Fisher-Yates shuffle: for i from len-1 down to 1,
        swap position i with an index j in [0, i].
        Each j is drawn by rejection sampling over
        hash_sequence([seed, counter]), with the counter incremented
        at every attempt and shared across all the draws.
        """

        result = list(items)
        counter = 0
        for i in range(len(result) - 1, 0, -1):
            j = None
            while j is None:
                value = self.hash_sequence([seed, counter])
                counter += 1
                j = unbiased_index(value, i + 1, self.ec.n)
            result[i], result[j] = result[j], result[i]
        return result


SECP256K1_SHA256 = HashEngine(CURVES["secp256k1"], hashlib.sha256)
SECP256R1_SHA256 = HashEngine(CURVES["secp256r1"], hashlib.sha256)
SECP384R1_SHA384 = HashEngine(CURVES["secp384r1"], hashlib.sha384)
SECP224R1_SHA224 = HashEngine(CURVES["secp224r1"], hashlib.sha224)

PRESETS: Dict[str, HashEngine] = {
    "secp256k1_sha256": SECP256K1_SHA256,
    "secp256r1_sha256": SECP256R1_SHA256,
    "secp384r1_sha384": SECP384R1_SHA384,
    "secp224r1_sha224": SECP224R1_SHA224,
}
