#!/usr/bin/env python3

# Copyright (C) 2024 The ringsig developers
#
# This file is part of ringsig. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ringsig including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Exception classes.

These are only meant to discriminate between Exceptions being raised
by ringsig from those raised by other codebase.

Users are usually better off just dealing with the regular
ValueError, TypeError, and RuntimeError
from which the ringsig versions are derived.
"""


class RingSigValueError(ValueError):
    pass


class RingSigTypeError(TypeError):
    pass


class RingSigRuntimeError(RuntimeError):
    pass


class ValueOutOfRange(RingSigValueError):
    "Private scalar not in [1, n-1]."


class PointNotOnCurve(RingSigValueError):
    "Point not on the curve of the hash engine group."


class InvalidEncoding(RingSigValueError):
    "Binary or hex-string data that cannot be decoded."


class MalformedSignature(InvalidEncoding):
    pass


class HashEngineMismatch(RingSigValueError):
    "Operands not sharing the same curve and hash function."


class RingSizeMismatch(RingSigValueError):
    pass


class UnsupportedHashInput(RingSigTypeError):
    "Element type not allowed in a hashed sequence."
