#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from functools import partial, update_wrapper
from typing import TYPE_CHECKING, Any, TypeVar

from ._markers import MISSING

if TYPE_CHECKING:
    from ._markers import MissingType

if sys.version_info >= (3, 9):
    from collections.abc import Callable, MutableMapping
else:
    from typing import Callable, MutableMapping

if sys.version_info >= (3, 11):
    from typing import overload
else:
    from typing_extensions import overload

_FunctionT = TypeVar("_FunctionT", bound=Callable[..., Any])


@overload
def replaces(
    namespace: MutableMapping[str, Any],
    replacer: MissingType = MISSING,
    /,
) -> Callable[[_FunctionT], _FunctionT]: ...
@overload
def replaces(
    namespace: MutableMapping[str, Any],
    replacer: _FunctionT,
    /,
) -> _FunctionT: ...
def replaces(namespace, replacer=MISSING, /):
    """
    Put *replacer* in place of the function of the same name in *namespace*.

    The library uses it to bind lazily imported implementations on the first
    call: the stub pays the import cost once and then rebinds the module
    global, so later calls go straight to the final function. Metadata such
    as the docstring is carried over from the replaced function.

    Raises:
      LookupError:
        if *namespace* has no function of that name.

    Example:
      >>> def current_backend():
      ...     return 'unknown'
      >>> def detect_backend():
      ...     @replaces(globals())
      ...     def current_backend():
      ...         return 'asyncio'
      >>> detect_backend()
      >>> current_backend()
      'asyncio'
    """

    if replacer is MISSING:
        return partial(replaces, namespace)

    name = replacer.__name__

    if name not in namespace:
        owner = namespace.get("__name__", "namespace")

        msg = f"{owner!r} has no function {name!r}"
        raise LookupError(msg)

    update_wrapper(replacer, namespace[name])

    # keeps the stub from staying alive through its replacement
    del replacer.__wrapped__

    namespace[name] = replacer

    return replacer
