#!/usr/bin/env python3

# Copyright (C) 2024 The ringsig developers
#
# This file is part of ringsig. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ringsig including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Strict ASN.1 DER subset for ring signature hashing and serialization.

Only the four universal types needed by ringsig are supported:

* 0x02: INTEGER, big-endian two's complement, shortest possible encoding:
  no 0x00 leading byte unless the next byte has its highest bit set
  (to avoid being interpreted as a negative number), and
  no 0xFF leading byte unless the next byte has its highest bit unset
* 0x04: OCTET STRING
* 0x0C: UTF8String
* 0x30: SEQUENCE, the concatenation of its DER encoded elements

Every element is [tag] [length] [content].

The length uses the definite form only:

* short form, a single byte for lengths up to 127
* long form, 0x80 | k followed by the k bytes big-endian length,
  without leading zero bytes and only for lengths above 127

Canonical encoding is required for interoperability: hash values are
computed over these bytes, so two implementations must produce
byte-identical encodings for identical logical sequences.
Parsing is strict: any non canonical encoding is rejected.
"""

from io import BytesIO
from typing import Iterable, List

from ringsig.alias import BinaryData
from ringsig.exceptions import InvalidEncoding
from ringsig.utils import bytesio_from_binarydata

INTEGER_TAG = 0x02
OCTET_STRING_TAG = 0x04
UTF8_STRING_TAG = 0x0C
SEQUENCE_TAG = 0x30


def _serialize_length(size: int) -> bytes:
    if size < 0x80:
        return size.to_bytes(1, byteorder="big", signed=False)
    size_bytes = size.to_bytes((size.bit_length() + 7) // 8, "big", signed=False)
    return (0x80 | len(size_bytes)).to_bytes(1, "big") + size_bytes


def _parse_length(stream: BytesIO) -> int:

    first_byte = stream.read(1)
    if not first_byte:
        raise InvalidEncoding("not enough binary data: missing length")
    if first_byte[0] < 0x80:
        return first_byte[0]
    if first_byte[0] == 0x80:
        raise InvalidEncoding("invalid indefinite length")

    k = first_byte[0] & 0x7F
    size_bytes = stream.read(k)
    if len(size_bytes) != k:
        err_msg = "not enough binary data: "
        err_msg += f"{len(size_bytes)} length bytes instead of {k}"
        raise InvalidEncoding(err_msg)
    if size_bytes[0] == 0:
        raise InvalidEncoding("invalid length padding")
    size = int.from_bytes(size_bytes, byteorder="big", signed=False)
    if size < 0x80:
        raise InvalidEncoding(f"invalid long form for short length: {size}")
    return size


def serialize_element(tag: int, content: bytes) -> bytes:
    return tag.to_bytes(1, "big") + _serialize_length(len(content)) + content


def serialize_integer(i: int) -> bytes:
    # 'highest bit set' padding included here
    size = (i if i >= 0 else ~i).bit_length() // 8 + 1
    return serialize_element(INTEGER_TAG, i.to_bytes(size, "big", signed=True))


def serialize_octet_string(octets: bytes) -> bytes:
    return serialize_element(OCTET_STRING_TAG, octets)


def serialize_utf8_string(text: bytes) -> bytes:
    return serialize_element(UTF8_STRING_TAG, text)


def serialize_sequence(elements: Iterable[bytes]) -> bytes:
    "Wrap already DER encoded elements into a SEQUENCE."
    return serialize_element(SEQUENCE_TAG, b"".join(elements))


def parse_element(data: BinaryData, tag: int) -> bytes:
    "Return the content of the next element, which must have the given tag."

    stream = bytesio_from_binarydata(data)

    marker = stream.read(1)
    if not marker:
        raise InvalidEncoding("not enough binary data: missing tag")
    if marker[0] != tag:
        err_msg = f"invalid tag: {marker.hex()}"
        err_msg += f" instead of {tag.to_bytes(1, 'big').hex()}"
        raise InvalidEncoding(err_msg)

    size = _parse_length(stream)
    content = stream.read(size)
    if len(content) != size:
        err_msg = "not enough binary data: "
        err_msg += f"{len(content)} bytes instead of {size}"
        raise InvalidEncoding(err_msg)
    return content


def parse_integer(data: BinaryData) -> int:

    content = parse_element(data, INTEGER_TAG)
    if not content:
        raise InvalidEncoding("zero size integer")
    if len(content) > 1 and (
        (content[0] == 0x00 and content[1] < 0x80)
        or (content[0] == 0xFF and content[1] >= 0x80)
    ):
        raise InvalidEncoding("invalid integer padding")
    return int.from_bytes(content, byteorder="big", signed=True)


def parse_sequence(data: BinaryData) -> BytesIO:
    "Return the SEQUENCE content as a stream of DER elements."
    return BytesIO(parse_element(data, SEQUENCE_TAG))


def parse_integer_sequence(data: BinaryData) -> List[int]:
    "Return all the INTEGER elements of a SEQUENCE."

    stream = parse_sequence(data)
    size = len(stream.getbuffer())
    result: List[int] = []
    while stream.tell() < size:
        result.append(parse_integer(stream))
    return result
