#!/usr/bin/env python3

# Copyright (C) 2024 The ringsig developers
#
# This file is part of ringsig. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ringsig including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Linkable ring signature dataclass, serialization, and verification.

A signature is made of the key image I and,
for each ring member, a challenge scalar c_i and a response scalar r_i.
Index i refers to the position of the public key in the ordered ring
returned by signing: the ring order is part of the verification context
and it is not recoverable from the signature.

Verification recomputes the commitments

* L_i = r_i * G + c_i * Q_i
* R_i = r_i * H(Q_i) + c_i * I

and checks that sum(c_i) = hash_sequence([hash_to_scalar(msg)] + L + R).

Serialization is the ASN.1 DER SEQUENCE of:

* OCTET STRING: the key image, SEC 1 compressed representation
* SEQUENCE of INTEGER: the c_i challenges
* SEQUENCE of INTEGER: the r_i responses

It does not contain the curve nor the hash function:
the verifier must know the HashEngine used for signing.
"""

from dataclasses import InitVar, dataclass
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple, Type, Union

from btclib.ec import bytes_from_point, double_mult, point_from_octets
from btclib.exceptions import BTClibValueError

from ringsig import der
from ringsig.alias import BinaryData, Octets, Point, String
from ringsig.exceptions import (
    HashEngineMismatch,
    InvalidEncoding,
    MalformedSignature,
    RingSigRuntimeError,
    RingSigTypeError,
    RingSizeMismatch,
)
from ringsig.hasher import HashEngine, point_on_curve
from ringsig.public_key import PublicKey
from ringsig.utils import bytes_from_octets, bytesio_from_binarydata, hex_string


def _key_image_from_octets(data: Octets, hasher: HashEngine) -> Point:
    "Return the key image from its SEC 1 compressed representation."

    try:
        key_image = bytes_from_octets(data, hasher.p_size + 1)
    except InvalidEncoding as e:
        raise MalformedSignature(f"invalid key image: {e}") from e
    if key_image[0] not in (0x02, 0x03):
        raise MalformedSignature("key image is not a compressed point")
    try:
        return point_from_octets(key_image, hasher.ec)
    except BTClibValueError as e:
        raise MalformedSignature(f"invalid key image: {e}") from e


@dataclass(frozen=True)
class Signature:
    """Linkable ring signature.

    - key_image is a curve point, the same for all the signatures
      of a given private key
    - c are the challenge scalars, 0 <= c_i < ec.n
    - r are the response scalars, 0 <= r_i < ec.n

    (ec.n is the curve order)
    """

    key_image: Point
    c: Tuple[int, ...]
    r: Tuple[int, ...]
    hasher: HashEngine
    check_validity: InitVar[bool] = True

    def __post_init__(self, check_validity: bool) -> None:
        for name in ("c", "r"):
            scalars = getattr(self, name)
            if isinstance(scalars, (str, bytes)) or not isinstance(scalars, Iterable):
                err_msg = f"scalars {name} are not a sequence: {type(scalars).__name__}"
                raise MalformedSignature(err_msg)
            object.__setattr__(self, name, tuple(scalars))
        if check_validity:
            self.assert_valid()

    @property
    def ring_size(self) -> int:
        return len(self.c)

    @property
    def components(self) -> List[int]:
        "Return key image coordinates, c scalars, and r scalars."
        return [*self.key_image, *self.c, *self.r]

    def assert_valid(self) -> None:
        ec = self.hasher.ec

        if not point_on_curve(self.key_image, ec):
            raise MalformedSignature(f"key image not on curve: {self.key_image!r}")

        if not self.c:
            raise MalformedSignature("empty ring")
        if len(self.c) != len(self.r):
            err_msg = f"c and r size mismatch: {len(self.c)} and {len(self.r)}"
            raise MalformedSignature(err_msg)

        for name, scalars in (("c", self.c), ("r", self.r)):
            for s in scalars:
                if not isinstance(s, int) or isinstance(s, bool):
                    raise MalformedSignature(f"scalar {name} is not an int: {s!r}")
                # s is a scalar, fail if s is not in [0, n-1]
                if not 0 <= s < ec.n:
                    err_msg = f"scalar {name} not in 0..n-1: "
                    if s < 0:
                        err_msg += f"{s}"
                    else:
                        err_msg += f"'{hex_string(s)}'" if s > 0xFFFFFFFF else f"{s}"
                    raise MalformedSignature(err_msg)

    def serialize(self, check_validity: bool = True) -> bytes:
        "Serialize the signature to its strict ASN.1 DER representation."

        if check_validity:
            self.assert_valid()

        key_image = bytes_from_point(self.key_image, self.hasher.ec, compressed=True)
        return der.serialize_sequence(
            [
                der.serialize_octet_string(key_image),
                der.serialize_sequence(der.serialize_integer(i) for i in self.c),
                der.serialize_sequence(der.serialize_integer(i) for i in self.r),
            ]
        )

    @classmethod
    def parse(
        cls: Type["Signature"],
        data: BinaryData,
        hasher: HashEngine,
        check_validity: bool = True,
    ) -> "Signature":
        """Return a Signature by parsing binary data.

        Deserialize a strict ASN.1 DER representation of a ring signature.
        If data is bytes or hex-string, it must be consumed entirely.
        """

        try:
            stream = bytesio_from_binarydata(data)
            sig_data = der.parse_sequence(stream)
            key_image_bytes = der.parse_element(sig_data, der.OCTET_STRING_TAG)
            c = der.parse_integer_sequence(sig_data)
            r = der.parse_integer_sequence(sig_data)
        except InvalidEncoding as e:
            raise MalformedSignature(f"invalid DER signature: {e}") from e

        # to prevent malleability
        # the sig_data substream must have been consumed entirely
        if sig_data.read(1) != b"":
            raise MalformedSignature("invalid DER sequence length")
        if isinstance(data, (bytes, str)) and stream.read(1) != b"":
            raise MalformedSignature("trailing data after DER sequence")

        key_image = _key_image_from_octets(key_image_bytes, hasher)
        return cls(key_image, c, r, hasher, check_validity)

    def to_dict(self, check_validity: bool = True) -> Dict[str, Union[str, List[int]]]:

        if check_validity:
            self.assert_valid()

        key_image = bytes_from_point(self.key_image, self.hasher.ec, compressed=True)
        return {"key_image": key_image.hex(), "c": list(self.c), "r": list(self.r)}

    @classmethod
    def from_dict(
        cls: Type["Signature"],
        dict_: Mapping[str, Any],
        hasher: HashEngine,
        check_validity: bool = True,
    ) -> "Signature":

        key_image = _key_image_from_octets(dict_["key_image"], hasher)
        return cls(key_image, dict_["c"], dict_["r"], hasher, check_validity)

    def _check_ring(self, pub_keys: Sequence[PublicKey]) -> None:
        if len(pub_keys) != len(self.c):
            err_msg = f"ring size mismatch: {len(pub_keys)} public keys "
            err_msg += f"for a signature of size {len(self.c)}"
            raise RingSizeMismatch(err_msg)
        for pub_key in pub_keys:
            if not isinstance(pub_key, PublicKey):
                err_msg = f"ring member is not a PublicKey: {type(pub_key).__name__}"
                raise RingSigTypeError(err_msg)
            if pub_key.hasher != self.hasher:
                err_msg = "ring member hash engine differs from the signature one"
                raise HashEngineMismatch(err_msg)

    def assert_as_valid(self, msg: String, pub_keys: Sequence[PublicKey]) -> None:
        """Raise an Error if the signature does not verify.

        Structural errors (malformed signature, ring size mismatch,
        hash engine mismatch) are raised as such,
        while a well-formed but invalid signature raises RingSigRuntimeError.
        """

        self.assert_valid()
        self._check_ring(pub_keys)

        hasher = self.hasher
        ec = hasher.ec
        msg_digest = hasher.hash_to_scalar(msg)

        L: List[Point] = []
        R: List[Point] = []
        for pub_key, c_i, r_i in zip(pub_keys, self.c, self.r):
            H_i = hasher.hash_to_point(pub_key.Q)
            L_i = double_mult(c_i, pub_key.Q, r_i, ec.G, ec)
            R_i = double_mult(c_i, self.key_image, r_i, H_i, ec)
            if L_i[1] == 0 or R_i[1] == 0:
                raise RingSigRuntimeError("invalid (INF) commitment")
            L.append(L_i)
            R.append(R_i)

        challenge = hasher.hash_sequence([msg_digest, *L, *R])
        if sum(self.c) % ec.n != challenge:
            raise RingSigRuntimeError("signature verification failed")

    def verify(self, msg: String, pub_keys: Sequence[PublicKey]) -> bool:
        """Return True if the signature verifies against the ordered ring.

        Only a cryptographically invalid signature returns False:
        a misuse of the API (malformed signature, ring size mismatch,
        hash engine mismatch) is raised as Error.
        """

        try:
            self.assert_as_valid(msg, pub_keys)
        except RingSigRuntimeError:
            return False
        return True

    def is_linked(self, other: "Signature") -> bool:
        "Return True if both signatures have been produced by the same private key."

        if not isinstance(other, Signature):
            raise RingSigTypeError(f"not a Signature: {type(other).__name__}")
        if other.hasher != self.hasher:
            raise HashEngineMismatch("signatures with different hash engines")
        return self.key_image == other.key_image
