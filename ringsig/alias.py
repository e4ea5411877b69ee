#!/usr/bin/env python3

# Copyright (C) 2024 The ringsig developers
#
# This file is part of ringsig. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ringsig including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Aliases

mypy aliases, documenting also coding input conventions.
"""

from io import BytesIO
from typing import Any, Callable, Tuple, Union

# Octets are a sequence of eight-bit bytes or a hex-string (not text string)
#
# hex-strings are strings that can be converted to bytes using bytes.fromhex,
# e.g.:
# "0279be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
# "02 79be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
#
# use ringsig.utils.bytes_from_octets to convert Octets to bytes
#
# Octets are used for serialized private keys, public keys and signatures
Octets = Union[bytes, str]

# bytes or text string (not hex-string)
#
# this is for string that can be
# converted to bytes using encode()
# e.g. a message to be signed
#    if isinstance(msg, str):
#        msg = msg.encode()
String = Union[bytes, bytearray, str]

# binary data, usually to be cosumed as byte stream,
# but possibily provided as Octets too
BinaryData = Union[BytesIO, Octets]

# Hash digest constructor, e.g. hashlib.sha256:
# the returned object must provide update(), digest(), and digest_size
HashF = Callable[[], Any]

# Elliptic curve point in affine coordinates, as used by btclib.
# The infinity point in affine coordinates is (int, 0):
# it can be checked with 'Q[1] == 0'
Point = Tuple[int, int]

# Elements allowed in a hashed sequence:
# text (UTF8String), integer (INTEGER), curve point (OCTET STRING)
HashInput = Union[String, int, Point]
