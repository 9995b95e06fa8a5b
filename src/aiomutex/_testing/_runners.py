#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from typing import TYPE_CHECKING, Any, TypeVar

from aiomutex.meta import MISSING, MissingType

if sys.version_info >= (3, 11):
    from typing import TypeVarTuple, Unpack
else:
    from typing_extensions import TypeVarTuple, Unpack

if TYPE_CHECKING:
    if sys.version_info >= (3, 9):
        from collections.abc import Callable, Coroutine
    else:
        from typing import Callable, Coroutine

_T = TypeVar("_T")
_Ts = TypeVarTuple("_Ts")


def _run_asyncio(func, args, backend_options):
    import asyncio

    return asyncio.run(func(*args), **backend_options)


def _run_trio(func, args, backend_options):
    import trio

    return trio.run(func, *args, **backend_options)


def _run_anyio(func, args, backend, backend_options):
    import anyio

    return anyio.run(
        func,
        *args,
        backend=backend,
        backend_options=backend_options or None,
    )


def run(
    func: Callable[[Unpack[_Ts]], Coroutine[Any, Any, _T]],
    /,
    *args: Unpack[_Ts],
    library: str | MissingType = MISSING,
    backend: str | MissingType = MISSING,
    backend_options: dict[str, Any] | None = None,
) -> _T:
    """
    Run the coroutine function *func* to completion in a new event loop of
    *library* (``"asyncio"``, ``"trio"`` or ``"anyio"``) and return its
    result. For ``"anyio"``, *backend* selects the underlying library.
    """

    if library is MISSING:
        if backend is MISSING:
            library = backend = "asyncio"
        else:
            library = backend
    elif backend is MISSING:
        backend = "asyncio" if library == "anyio" else library

    if backend_options is None:
        backend_options = {}

    if library == "asyncio":
        return _run_asyncio(func, args, backend_options)

    if library == "trio":
        return _run_trio(func, args, backend_options)

    if library == "anyio":
        return _run_anyio(func, args, backend, backend_options)

    msg = f"unsupported async library {library!r}"
    raise ValueError(msg)
