#!/usr/bin/env python3

# Copyright (C) 2024 The ringsig developers
#
# This file is part of ringsig. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ringsig including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Public key dataclass.

A curve point bound to the HashEngine it is meant to be used with.

The SEC 1 v.2 section 2.3.3 representation is used for serialization:
compressed (0x02, 0x03 prefix followed by the x-coordinate)
or uncompressed (0x04 prefix followed by x- and y-coordinates).
It does not contain the curve nor the hash function.
"""

from dataclasses import InitVar, dataclass
from typing import Any, Dict, Mapping, Type

from btclib.ec import bytes_from_point, point_from_octets
from btclib.exceptions import BTClibValueError

from ringsig.alias import Octets, Point
from ringsig.exceptions import InvalidEncoding
from ringsig.hasher import HashEngine, require_point
from ringsig.utils import bytes_from_octets


@dataclass(frozen=True)
class PublicKey:
    Q: Point
    hasher: HashEngine
    check_validity: InitVar[bool] = True

    def __post_init__(self, check_validity: bool) -> None:
        if check_validity:
            self.assert_valid()

    def assert_valid(self) -> None:
        require_point(self.Q, self.hasher.ec)

    @property
    def point(self) -> Point:
        return self.Q

    def serialize(self, compressed: bool = True, check_validity: bool = True) -> bytes:
        "Return the SEC 1 compressed/uncompressed representation."

        if check_validity:
            self.assert_valid()

        return bytes_from_point(self.Q, self.hasher.ec, compressed)

    @classmethod
    def parse(
        cls: Type["PublicKey"], data: Octets, hasher: HashEngine
    ) -> "PublicKey":
        "Return a PublicKey from its SEC 1 bytes or hex-string representation."

        p_size = hasher.p_size
        pub_key = bytes_from_octets(data, (p_size + 1, 2 * p_size + 1))
        try:
            Q = point_from_octets(pub_key, hasher.ec)
        except BTClibValueError as e:
            raise InvalidEncoding(f"invalid public key: {e}") from e
        if Q[1] == 0:
            raise InvalidEncoding("invalid public key: infinity point")
        return cls(Q, hasher)

    def to_dict(self, check_validity: bool = True) -> Dict[str, str]:
        return {"public_key": self.serialize(True, check_validity).hex()}

    @classmethod
    def from_dict(
        cls: Type["PublicKey"], dict_: Mapping[str, Any], hasher: HashEngine
    ) -> "PublicKey":
        return cls.parse(dict_["public_key"], hasher)
