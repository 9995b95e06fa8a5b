#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from typing import TYPE_CHECKING, Literal

from sniffio import (
    AsyncLibraryNotFoundError as AsyncLibraryNotFoundError,
    thread_local,
)
from wrapt import when_imported

from aiomutex.meta import replaces

if sys.version_info >= (3, 11):
    from typing import overload
else:
    from typing_extensions import overload

if TYPE_CHECKING:
    from sniffio._impl import _ThreadLocal

current_async_library_tlocal: _ThreadLocal = thread_local


def _asyncio_running() -> bool:
    return False  # asyncio has not been imported by anyone yet


@when_imported("asyncio")
def _(asyncio):
    # asyncio._get_running_loop() returns None outside of a running loop,
    # unlike get_running_loop(), which raises
    get_running_loop_if_exists = asyncio._get_running_loop

    @replaces(globals())
    def _asyncio_running():
        return get_running_loop_if_exists() is not None


@overload
def current_async_library(*, failsafe: Literal[False] = False) -> str: ...
@overload
def current_async_library(*, failsafe: Literal[True]) -> str | None: ...
def current_async_library(*, failsafe=False):
    """
    Return the name of the async library running in the current thread:
    ``"asyncio"``, ``"trio"``, or whatever name another library announced
    through :data:`current_async_library_tlocal`.

    Trio (and anyio running on top of it) announces itself through the
    thread-local; asyncio is detected by its running event loop.

    Args:
      failsafe:
        If :data:`True`, return :data:`None` instead of raising when no async
        library is running.

    Raises:
      AsyncLibraryNotFoundError:
        if no async library is running and *failsafe* is not set.
    """

    if (name := current_async_library_tlocal.name) is not None:
        return name

    if _asyncio_running():
        return "asyncio"

    if failsafe:
        return None

    msg = "unknown async library, or not in async context"
    raise AsyncLibraryNotFoundError(msg)
