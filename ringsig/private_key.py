#!/usr/bin/env python3

# Copyright (C) 2024 The ringsig developers
#
# This file is part of ringsig. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ringsig including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Private key dataclass and linkable ring signature generation.

The signature is an AOS (Abe-Ohkubo-Suzuki) ring signature
extended with a CryptoNote-style key image I = q * H(Q),
where q is the private key, Q = q * G its public key,
and H the HashEngine hash_to_point function.
The key image does not depend on the message nor on the ring:
two signatures with the same key image have been produced
by the same private key.

Signing is fully deterministic: nonces are derived from a seed
that binds the private key and the message,
seed = hash_sequence([q, hash_to_scalar(msg)]),
so that no external randomness source is required,
while being unpredictable to anyone not knowing q.

The same seed drives the shuffle of the ring: the signer position
is unknown to anybody but the signer.

For each ring member i (with public key Q_i):

* nonce_i = hash_sequence(["q", seed, i])
* w_i = hash_sequence(["w", seed, i]) for decoys, 0 for the signer
* L_i = nonce_i * G + w_i * Q_i
* R_i = nonce_i * H(Q_i) + w_i * I

then the challenge is e = hash_sequence([hash_to_scalar(msg)] + L + R),
decoys get c_i = w_i and r_i = nonce_i,
while the signer closes the ring with
c_s = e - sum(w_i) and r_s = nonce_s - c_s * q (mod n).
"""

import secrets
from dataclasses import dataclass, field
from functools import cached_property
from typing import List, Sequence, Tuple, Type, Union

from btclib.ec import double_mult, mult

from ringsig.alias import Octets, Point, String
from ringsig.exceptions import (
    HashEngineMismatch,
    RingSigTypeError,
    RingSigValueError,
    ValueOutOfRange,
)
from ringsig.hasher import HashEngine
from ringsig.public_key import PublicKey
from ringsig.signature import Signature
from ringsig.utils import bytes_from_octets, hex_string


@dataclass(frozen=True)
class _Signer:
    "The ring member that knows its private key."

    prv_key: "PrivateKey"

    @property
    def public_key(self) -> PublicKey:
        return self.prv_key.public_key


@dataclass(frozen=True)
class _Decoy:
    "A ring member for which only the public key is known."

    public_key: PublicKey


RingMember = Union[_Signer, _Decoy]


@dataclass(frozen=True)
class PrivateKey:
    q: int = field(repr=False)
    hasher: HashEngine
    public_key: PublicKey = field(init=False, compare=False)

    def __post_init__(self) -> None:
        self.assert_valid()
        Q = mult(self.q, self.hasher.ec.G, self.hasher.ec)
        object.__setattr__(self, "public_key", PublicKey(Q, self.hasher))

    def assert_valid(self) -> None:
        if not isinstance(self.q, int) or isinstance(self.q, bool):
            raise RingSigTypeError(f"private key is not an int: {self.q!r}")
        # q is a scalar, fail if q is not in [1, n-1]
        if not 0 < self.q < self.hasher.ec.n:
            err_msg = "private key not in 1..n-1: "
            err_msg += f"'{hex_string(self.q)}'" if self.q > 0xFFFFFFFF else f"{self.q}"
            raise ValueOutOfRange(err_msg)

    @property
    def point(self) -> Point:
        return self.public_key.Q

    @cached_property
    def key_image(self) -> Point:
        """Return the key image q * H(Q).

        It is a pure function of the private key and the hash engine:
        concurrent first accesses might compute it more than once,
        always obtaining the same value.
        """
        H = self.hasher.hash_to_point(self.point)
        return mult(self.q, H, self.hasher.ec)

    @classmethod
    def generate(cls: Type["PrivateKey"], hasher: HashEngine) -> "PrivateKey":
        "Return a new random private key."
        q = 1 + secrets.randbelow(hasher.ec.n - 1)
        return cls(q, hasher)

    def serialize(self) -> bytes:
        "Return the big-endian representation, zero padded to the field size."
        return self.q.to_bytes(self.hasher.p_size, byteorder="big", signed=False)

    @classmethod
    def parse(cls: Type["PrivateKey"], data: Octets, hasher: HashEngine) -> "PrivateKey":
        "Return a PrivateKey from its bytes or hex-string representation."

        prv_key = bytes_from_octets(data, hasher.p_size)
        q = int.from_bytes(prv_key, byteorder="big", signed=False)
        return cls(q, hasher)

    def sign(
        self, msg: String, foreign_keys: Sequence[PublicKey]
    ) -> Tuple[Signature, List[PublicKey]]:
        """Sign a message with this private key hidden among the foreign keys.

        Return the signature and the ring public keys in the order
        required for verification (the signer key included).
        """

        for pub_key in foreign_keys:
            if not isinstance(pub_key, PublicKey):
                err_msg = f"foreign key is not a PublicKey: {type(pub_key).__name__}"
                raise RingSigTypeError(err_msg)
            if pub_key.hasher != self.hasher:
                err_msg = "foreign key hash engine differs from the signer one"
                raise HashEngineMismatch(err_msg)
            if pub_key == self.public_key:
                raise RingSigValueError("signer public key among the foreign keys")

        hasher = self.hasher
        msg_digest = hasher.hash_to_scalar(msg)
        seed = hasher.hash_sequence([self.q, msg_digest])

        members: List[RingMember] = [_Signer(self)]
        members.extend(_Decoy(pub_key) for pub_key in foreign_keys)
        ring = hasher.shuffle(members, seed)

        nonces, w = self._nonces(ring, seed)
        L, R = self._commitments(ring, nonces, w)
        challenge = hasher.hash_sequence([msg_digest, *L, *R])
        c, r = self._close_ring(ring, nonces, w, challenge)

        sig = Signature(self.key_image, c, r, hasher)
        return sig, [member.public_key for member in ring]

    def _nonces(
        self, ring: Sequence[RingMember], seed: int
    ) -> Tuple[List[int], List[int]]:
        nonces: List[int] = []
        w: List[int] = []
        for i, member in enumerate(ring):
            nonces.append(self.hasher.hash_sequence(["q", seed, i]))
            if isinstance(member, _Signer):
                w.append(0)
            else:
                w.append(self.hasher.hash_sequence(["w", seed, i]))
        return nonces, w

    def _commitments(
        self, ring: Sequence[RingMember], nonces: Sequence[int], w: Sequence[int]
    ) -> Tuple[List[Point], List[Point]]:
        ec = self.hasher.ec
        key_image = self.key_image
        L: List[Point] = []
        R: List[Point] = []
        for member, nonce, w_i in zip(ring, nonces, w):
            Q_i = member.public_key.Q
            H_i = self.hasher.hash_to_point(Q_i)
            if isinstance(member, _Signer):
                L.append(mult(nonce, ec.G, ec))
                R.append(mult(nonce, H_i, ec))
            else:
                # decoy: simulate the response without knowing the private key
                L.append(double_mult(w_i, Q_i, nonce, ec.G, ec))
                R.append(double_mult(w_i, key_image, nonce, H_i, ec))
        return L, R

    def _close_ring(
        self,
        ring: Sequence[RingMember],
        nonces: Sequence[int],
        w: Sequence[int],
        challenge: int,
    ) -> Tuple[List[int], List[int]]:
        n = self.hasher.ec.n
        c: List[int] = []
        r: List[int] = []
        for member, nonce, w_i in zip(ring, nonces, w):
            if isinstance(member, _Signer):
                c_s = (challenge - sum(w)) % n
                c.append(c_s)
                r.append((nonce - c_s * self.q) % n)
            else:
                c.append(w_i)
                r.append(nonce)
        return c, r
