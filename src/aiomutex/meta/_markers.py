#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import enum
import sys

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import NoReturn

if sys.version_info >= (3, 11):  # runtime introspection support
    from typing import final
else:  # typing-extensions>=4.1.0
    from typing_extensions import final

if TYPE_CHECKING:
    if sys.version_info >= (3, 11):  # a caching bug fix
        from typing import Literal
    else:  # typing-extensions>=4.6.0
        from typing_extensions import Literal


# An enum member lets type checkers narrow `value is MISSING` the same way
# they narrow `value is None`.
@final
class MissingType(enum.Enum):
    """
    A singleton class for :data:`MISSING`; mimics :data:`~types.NoneType`.
    """

    MISSING = "MISSING"

    def __init_subclass__(cls, /, **kwargs: object) -> NoReturn:
        bcs = MissingType
        bcs_repr = f"{bcs.__module__}.{bcs.__qualname__}"

        msg = f"type '{bcs_repr}' is not an acceptable base type"
        raise TypeError(msg)

    def __repr__(self, /) -> str:
        return f"{self.__class__.__module__}.{self._name_}"

    def __str__(self, /) -> str:
        return f"{self.__class__.__module__}.{self._name_}"

    def __bool__(self, /) -> Literal[False]:
        return False


MISSING = MissingType.MISSING
"""
A marker for parameters that were not passed, for cases where :data:`None`
is a meaningful value.
"""
