#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from typing import TYPE_CHECKING, Any, Literal, NoReturn, Protocol, final

from ._libraries import current_async_library

if TYPE_CHECKING:
    if sys.version_info >= (3, 9):
        from collections.abc import Generator
    else:
        from typing import Generator


class AsyncWaiter(Protocol):
    """
    A single-use continuation of the task that awaits it.

    Awaiting suspends the current task until :meth:`wake` is called; the task
    is then resumed on a later turn of its event loop, never synchronously
    inside :meth:`wake`. Cancellation of the awaiting task propagates out of
    the await as usual.
    """

    __slots__ = ()

    def __await__(self, /) -> Generator[Any, Any, bool]:
        """..."""

    def wake(self, /) -> None:
        """
        Schedule the resumption of the awaiting task. Safe to call from any
        thread and more than once; only the first call has an effect.
        """

    def cancelled(self, /) -> bool:
        """
        Return :data:`True` if the awaiting task was cancelled before it was
        woken.

        The answer is available in the same scheduler turn as the
        cancellation itself, before the task gets to run, so a caller about
        to :meth:`wake` the task can tell that the wakeup would be lost.
        """


def _get_asyncio_waiter_class() -> type[AsyncWaiter]:
    from asyncio import (
        InvalidStateError,
        _get_running_loop as get_running_loop_if_exists,
        get_running_loop,
    )

    @final
    class _AsyncioWaiter(AsyncWaiter):
        __slots__ = (
            "__cancelled",
            "__future",
            "__loop",
        )

        def __init__(self, /) -> None:
            self.__cancelled = False
            self.__future = None
            self.__loop = get_running_loop()

        def __init_subclass__(cls, /, **kwargs: Any) -> NoReturn:
            bcs = _AsyncioWaiter
            bcs_repr = f"{bcs.__module__}.{bcs.__qualname__}"

            msg = f"type '{bcs_repr}' is not an acceptable base type"
            raise TypeError(msg)

        def __reduce__(self, /) -> NoReturn:
            msg = f"cannot reduce {self!r}"
            raise TypeError(msg)

        def __await__(self, /) -> Generator[Any, Any, bool]:
            self.__future = future = self.__loop.create_future()

            try:
                yield from future.__await__()
            finally:
                self.__future = None
                self.__cancelled = future.cancelled()

            return True

        def __notify(self, /) -> None:
            if self.__future is not None:
                try:
                    self.__future.set_result(True)
                except InvalidStateError:  # task is cancelled
                    pass

        def wake(self, /) -> None:
            # Future.set_result() only schedules the task step via
            # call_soon(), so the waiter resumes on the next loop iteration.
            if get_running_loop_if_exists() is self.__loop:
                self.__notify()
            else:
                try:
                    self.__loop.call_soon_threadsafe(self.__notify)
                except RuntimeError:  # event loop is closed
                    pass

        def cancelled(self, /) -> bool:
            # Task.cancel() cancels the awaited future synchronously
            if (future := self.__future) is not None:
                return future.cancelled()

            return self.__cancelled

    return _AsyncioWaiter


def _get_trio_waiter_class() -> type[AsyncWaiter]:
    from trio import RunFinishedError
    from trio.lowlevel import (
        Abort,
        current_task,
        current_trio_token,
        reschedule,
        wait_task_rescheduled,
    )

    @final
    class _TrioWaiter(AsyncWaiter):
        __slots__ = (
            "__cancelled",
            "__task",
            "__token",
        )

        def __init__(self, /) -> None:
            self.__cancelled = False
            self.__task = None
            self.__token = current_trio_token()

        def __init_subclass__(cls, /, **kwargs: Any) -> NoReturn:
            bcs = _TrioWaiter
            bcs_repr = f"{bcs.__module__}.{bcs.__qualname__}"

            msg = f"type '{bcs_repr}' is not an acceptable base type"
            raise TypeError(msg)

        def __reduce__(self, /) -> NoReturn:
            msg = f"cannot reduce {self!r}"
            raise TypeError(msg)

        def __await__(self, /) -> Generator[Any, Any, bool]:
            self.__task = current_task()

            try:
                yield from wait_task_rescheduled(self.__abort).__await__()
            finally:
                self.__task = None

            return True

        def __abort(self, /, raise_cancel: Any) -> Literal[Abort.SUCCEEDED]:
            # Trio calls this synchronously from CancelScope.cancel() and
            # then reschedules the task itself, so it must not be
            # rescheduled again by a later wake().
            self.__cancelled = True
            self.__task = None

            return Abort.SUCCEEDED

        def __notify(self, /) -> None:
            if self.__task is not None:
                reschedule(self.__task)
                self.__task = None

        def wake(self, /) -> None:
            try:
                current_token = current_trio_token()
            except RuntimeError:  # no called trio.run()
                current_token = None

            if current_token is self.__token:
                self.__notify()
            else:
                try:
                    self.__token.run_sync_soon(self.__notify)
                except RunFinishedError:  # trio.run() is finished
                    pass

        def cancelled(self, /) -> bool:
            return self.__cancelled

    return _TrioWaiter


def _create_asyncio_waiter() -> AsyncWaiter:
    global _create_asyncio_waiter

    _create_asyncio_waiter = _get_asyncio_waiter_class()

    return _create_asyncio_waiter()


def _create_trio_waiter() -> AsyncWaiter:
    global _create_trio_waiter

    _create_trio_waiter = _get_trio_waiter_class()

    return _create_trio_waiter()


def create_async_waiter() -> AsyncWaiter:
    """
    Create a waiter for the current task of the running async library.

    Raises:
      RuntimeError:
        if the current async library is not supported.
    """

    library = current_async_library()

    if library == "asyncio":
        return _create_asyncio_waiter()

    if library == "trio":
        return _create_trio_waiter()

    msg = f"unsupported async library {library!r}"
    raise RuntimeError(msg)
