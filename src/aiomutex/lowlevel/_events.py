#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, NoReturn

from ._checkpoints import async_checkpoint
from ._waiters import create_async_waiter

if TYPE_CHECKING:
    if sys.version_info >= (3, 9):
        from collections.abc import Generator
    else:
        from typing import Generator


class AsyncEvent(ABC):
    """
    A one-shot event awaited by exactly one task.

    It ends in exactly one of two final states: *set* (by :meth:`set`) or
    *cancelled* (when the awaiting task is cancelled before the event was
    set). Whichever happens first wins, and the loser observes it:
    :meth:`set` returns :data:`False` for a cancelled event, and a task
    cancelled after the event was set sees :meth:`cancelled` return
    :data:`False`.
    """

    __slots__ = ()

    @abstractmethod
    def __await__(self, /) -> Generator[Any, Any, bool]:
        """
        Wait until the event is set. Returns :data:`True` if it was set, or
        :data:`False` if it had already been cancelled.
        """

        raise NotImplementedError

    def __bool__(self, /) -> bool:
        return self.is_set()

    @abstractmethod
    def set(self, /) -> bool:
        """
        Set the event and wake the awaiting task. Returns :data:`True` on
        success, :data:`False` if the event is already set or cancelled.
        """

        raise NotImplementedError

    @abstractmethod
    def is_set(self, /) -> bool:
        """..."""

        raise NotImplementedError

    @abstractmethod
    def cancelled(self, /) -> bool:
        """..."""

        raise NotImplementedError


class _AsyncEventImpl(AsyncEvent):
    __slots__ = (
        "_is_cancelled",
        "_is_set",
        "_waiter",
    )

    def __init__(self, /) -> None:
        self._is_cancelled = False
        self._is_set = False
        self._waiter = None

    def __reduce__(self, /) -> NoReturn:
        msg = f"cannot reduce {self!r}"
        raise TypeError(msg)

    def __repr__(self, /) -> str:
        cls_repr = f"{AsyncEvent.__module__}.AsyncEvent"

        if self._is_set:
            state = "set"
        elif self._is_cancelled:
            state = "cancelled"
        else:
            state = "unset"

        return f"<{cls_repr} object at {id(self):#x}: {state}>"

    def __await__(self, /) -> Generator[Any, Any, bool]:
        if self._is_set:
            yield from async_checkpoint().__await__()

            return True

        if self._is_cancelled:
            yield from async_checkpoint().__await__()

            return False

        if self._waiter is not None:
            msg = "this event is already in use"
            raise RuntimeError(msg)

        self._waiter = create_async_waiter()

        try:
            return (yield from self._waiter.__await__())
        finally:
            self._waiter = None

            if not self._is_set:
                self._is_cancelled = True

    def set(self, /) -> bool:
        if self._is_set or self._is_cancelled:
            return False

        waiter = self._waiter

        # the task is cancelled but has not resumed yet
        if waiter is not None and waiter.cancelled():
            self._is_cancelled = True

            return False

        self._is_set = True

        if waiter is not None:
            waiter.wake()

        return True

    def is_set(self, /) -> bool:
        return self._is_set

    def cancelled(self, /) -> bool:
        if self._is_cancelled:
            return True

        waiter = self._waiter

        return waiter is not None and waiter.cancelled()


def create_async_event() -> AsyncEvent:
    """
    Create a one-shot event for the current task of the running async
    library.
    """

    return _AsyncEventImpl()
