#!/usr/bin/env python3

# Copyright (C) 2024 The ringsig developers
#
# This file is part of ringsig. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ringsig including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"__init__ module for the ringsig package."

name = "ringsig"
__version__ = "2024.3.1"
__author__ = "The ringsig developers"
__author_email__ = "devs@ringsig.org"
__copyright__ = "Copyright (C) 2024 The ringsig developers"
__license__ = "MIT License"
