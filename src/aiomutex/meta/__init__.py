#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

"""
This package implements the metaprogramming helpers the library relies on:
lazy rebinding of module-level functions, a sentinel for missing arguments,
and preparation of public names for external use.
"""

from ._exports import (
    export as export,
)
from ._functions import (
    replaces as replaces,
)
from ._markers import (
    MISSING as MISSING,
    MissingType as MissingType,
)
