#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import os
import sys

from contextvars import ContextVar
from inspect import iscoroutinefunction
from typing import TYPE_CHECKING, Any, Final, TypeVar

from wrapt import decorator

from aiomutex.meta import MISSING, MissingType, replaces

from ._libraries import current_async_library

if sys.version_info >= (3, 11):
    from typing import overload
else:
    from typing_extensions import overload

if sys.version_info >= (3, 9):
    from collections.abc import Callable, Coroutine
else:
    from typing import Callable, Coroutine

if TYPE_CHECKING:
    from types import TracebackType

_CoroutineFunctionT = TypeVar(
    "_CoroutineFunctionT",
    bound=Callable[..., Coroutine[Any, Any, Any]],
)


def _getenv_flag(library: str) -> bool:
    # the per-library variable wins, even when set to an empty string
    return bool(
        os.getenv(
            f"AIOMUTEX_{library.upper()}_CHECKPOINTS",
            os.getenv("AIOMUTEX_ASYNC_CHECKPOINTS", ""),
        )
    )


_CHECKPOINTS_ENABLED_BY_DEFAULT: Final[dict[str, bool]] = {
    "asyncio": _getenv_flag("asyncio"),
    "trio": _getenv_flag("trio"),
}

_async_checkpoints_cvar: ContextVar[bool | None] = ContextVar(
    "_async_checkpoints_cvar",
    default=None,
)


def async_checkpoint_enabled() -> bool:
    """
    Return :data:`True` if async checkpoints are enabled in the current
    context, :data:`False` otherwise.
    """

    if (enabled := _async_checkpoints_cvar.get()) is not None:
        return enabled

    library = current_async_library(failsafe=True)

    return _CHECKPOINTS_ENABLED_BY_DEFAULT.get(library, False)


class _CheckpointsScope:
    __slots__ = (
        "__enabled",
        "__token",
    )

    def __init__(self, /, enabled: bool) -> None:
        self.__enabled = enabled

    async def __aenter__(self, /) -> bool:
        self.__token = _async_checkpoints_cvar.set(self.__enabled)

        return self.__enabled

    async def __aexit__(
        self,
        /,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        _async_checkpoints_cvar.reset(self.__token)


def _scoped_checkpoints(enabled: bool, wrapped: Any, /) -> Any:
    if wrapped is MISSING:
        return _CheckpointsScope(enabled)

    if not iscoroutinefunction(wrapped):
        msg = f"{wrapped!r} is not a coroutine function"
        raise TypeError(msg)

    @decorator
    async def wrapper(wrapped, instance, args, kwargs, /):
        async with _CheckpointsScope(enabled):
            return await wrapped(*args, **kwargs)

    return wrapper(wrapped)


@overload
def enable_checkpoints(wrapped: MissingType = MISSING, /) -> Any: ...
@overload
def enable_checkpoints(
    wrapped: _CoroutineFunctionT,
    /,
) -> _CoroutineFunctionT: ...
def enable_checkpoints(wrapped=MISSING, /):
    """
    Enable async checkpoints in the current context.

    Can be used as an async context manager or as a decorator for coroutine
    functions.

    Example:
      >>> async def test():
      ...     async with enable_checkpoints():
      ...         handle = await mutex.acquire()  # yields once
    """

    return _scoped_checkpoints(True, wrapped)


@overload
def disable_checkpoints(wrapped: MissingType = MISSING, /) -> Any: ...
@overload
def disable_checkpoints(
    wrapped: _CoroutineFunctionT,
    /,
) -> _CoroutineFunctionT: ...
def disable_checkpoints(wrapped=MISSING, /):
    """
    The counterpart of :func:`enable_checkpoints`; overrides environment
    variables for the duration of the call.
    """

    return _scoped_checkpoints(False, wrapped)


async def _asyncio_checkpoint() -> None:
    from types import coroutine

    @replaces(globals())
    @coroutine
    def _asyncio_checkpoint():
        yield

    await _asyncio_checkpoint()


async def _trio_checkpoint() -> None:
    global _trio_checkpoint

    from trio.lowlevel import checkpoint as _trio_checkpoint

    await _trio_checkpoint()


async def async_checkpoint(*, force: bool = False) -> None:
    """
    A pure async checkpoint.

    It checks for cancellation and allows the scheduler to switch to another
    task. Checkpoints are disabled by default for every library, so that an
    uncontended :meth:`AsyncMutex.acquire() <aiomutex.AsyncMutex.acquire>`
    never suspends. In order of priority, they are enabled by:

    * ``force=True``;
    * :func:`enable_checkpoints`/:func:`disable_checkpoints` in the current
      context;
    * a non-empty ``AIOMUTEX_<ASYNC_LIBRARY>_CHECKPOINTS`` environment
      variable, for one library;
    * a non-empty ``AIOMUTEX_ASYNC_CHECKPOINTS`` environment variable, for
      all libraries.
    """

    if not force and not async_checkpoint_enabled():
        return

    library = current_async_library(failsafe=True)

    if library == "asyncio":
        await _asyncio_checkpoint()
    elif library == "trio":
        await _trio_checkpoint()
