#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from collections import deque
from logging import getLogger
from typing import TYPE_CHECKING, Any, Final, Literal, NoReturn

from .lowlevel import (
    async_checkpoint,
    create_async_event,
    current_async_task,
    current_async_task_ident,
)

if sys.version_info >= (3, 11):
    from typing import final, overload
else:
    from typing_extensions import final, overload

if TYPE_CHECKING:
    from types import TracebackType

    if sys.version_info >= (3, 11):
        from typing import Self
    else:
        from typing_extensions import Self

_LOGGER: Final = getLogger(__name__)


class UsageError(RuntimeError):
    """
    Base class for violations of the mutex contract by its caller.
    """


class InvalidReleaseError(UsageError):
    """
    Raised when a handle that is already consumed (or that belongs to another
    mutex) is released. The mutex state is left untouched.
    """


class MutexDestroyedError(UsageError):
    """
    Raised by acquisitions that were pending when the mutex was closed, and
    by any acquisition attempted after that.
    """


@final
class ReleaseHandle:
    """
    A one-shot capability representing exclusive ownership of a mutex.

    Returned by :meth:`AsyncMutex.acquire`. It must be released exactly once,
    either via :meth:`release` or :meth:`AsyncMutex.release`, or by using it
    as a context manager:

    Example:
      >>> async def update(mutex, state):
      ...     with await mutex.acquire():
      ...         state.value += 1
    """

    __slots__ = (
        "__weakref__",
        "_consumed",
        "_mutex",
        "_owner",
        "_task",
    )

    def __new__(cls, /, *args: Any, **kwargs: Any) -> NoReturn:
        cls_repr = f"{cls.__module__}.{cls.__qualname__}"

        msg = f"cannot create '{cls_repr}' instances"
        raise TypeError(msg)

    def __init_subclass__(cls, /, **kwargs: Any) -> NoReturn:
        bcs = ReleaseHandle
        bcs_repr = f"{bcs.__module__}.{bcs.__qualname__}"

        msg = f"type '{bcs_repr}' is not an acceptable base type"
        raise TypeError(msg)

    def __reduce__(self, /) -> NoReturn:
        msg = f"cannot reduce {self!r}"
        raise TypeError(msg)

    def __copy__(self, /) -> NoReturn:
        msg = f"cannot copy {self!r}"
        raise TypeError(msg)

    def __deepcopy__(self, /, memo: dict[int, Any]) -> NoReturn:
        msg = f"cannot copy {self!r}"
        raise TypeError(msg)

    def __repr__(self, /) -> str:
        cls = self.__class__
        cls_repr = f"{cls.__module__}.{cls.__qualname__}"

        if self._consumed:
            state = "consumed"
        else:
            state = "active"

        return f"<{cls_repr} object at {id(self):#x}: {state}>"

    def __bool__(self, /) -> bool:
        """
        Returns :data:`True` while the handle has not been released.
        """

        return not self._consumed

    def __enter__(self, /) -> Self:
        return self

    def __exit__(
        self,
        /,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self._mutex.release(self)

    def release(self, /) -> None:
        """
        Relinquish the ownership; equivalent to ``mutex.release(handle)``.

        Raises:
          InvalidReleaseError:
            if the handle is already consumed.
        """

        self._mutex.release(self)

    @property
    def consumed(self, /) -> bool:
        """
        :data:`True` once the handle has been released.
        """

        return self._consumed

    @property
    def mutex(self, /) -> AsyncMutex:
        """
        The mutex this handle belongs to.
        """

        return self._mutex

    @property
    def owner(self, /) -> tuple[str, int]:
        """
        The identifier of the task the ownership was granted to.

        It stays unique while the handle is active: an active handle keeps
        its task object alive, so no other task can be given the same
        identifier even if the owner finished without releasing.
        """

        return self._owner


def _create_handle(
    mutex: AsyncMutex,
    owner: tuple[str, int],
    task: object,
) -> ReleaseHandle:
    handle = object.__new__(ReleaseHandle)

    handle._consumed = False
    handle._mutex = mutex
    handle._owner = owner
    handle._task = task

    return handle


class AsyncMutex:
    """
    A fair (FIFO) mutual exclusion lock for tasks of one event loop.

    An uncontended acquisition is granted synchronously. A contended one
    suspends the task until a release hands the ownership directly to it:
    the mutex never becomes unlocked while tasks are waiting, so a newcomer
    cannot overtake them.

    The mutex is not reentrant, and must be shared by reference: copying and
    pickling are refused, since a copy would be an independent lock guarding
    the same data.

    Example:
      >>> async def transfer(mutex, accounts, src, dst, amount):
      ...     async with mutex:
      ...         balance = accounts[src]
      ...         await audit(src, balance)  # other tasks may run here
      ...         accounts[src] = balance - amount
      ...         accounts[dst] += amount
    """

    __slots__ = (
        "__weakref__",
        "_closed",
        "_handle",
        "_locked",
        "_waiters",
    )

    def __new__(cls, /) -> Self:
        """..."""

        self = object.__new__(cls)

        self._closed = False
        self._handle = None
        self._locked = False
        self._waiters = deque()

        return self

    def __reduce__(self, /) -> NoReturn:
        msg = f"cannot reduce {self!r}"
        raise TypeError(msg)

    def __copy__(self, /) -> NoReturn:
        msg = f"cannot copy {self!r}"
        raise TypeError(msg)

    def __deepcopy__(self, /, memo: dict[int, Any]) -> NoReturn:
        msg = f"cannot copy {self!r}"
        raise TypeError(msg)

    def __repr__(self, /) -> str:
        """..."""

        cls = self.__class__
        cls_repr = f"{cls.__module__}.{cls.__qualname__}"

        object_repr = f"{cls_repr}()"

        if self._closed:
            extra = "closed"
        elif self._locked:
            extra = f"locked, waiting={len(self._waiters)}"
        else:
            extra = "unlocked"

        return f"<{object_repr} at {id(self):#x} [{extra}]>"

    def __bool__(self, /) -> bool:
        """
        Returns :data:`True` if the mutex is held by any task.

        Used by the standard :ref:`truth testing procedure <truth>`.
        """

        return self._locked

    async def __aenter__(self, /) -> ReleaseHandle:
        """..."""

        return await self.acquire()

    async def __aexit__(
        self,
        /,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        """..."""

        handle = self._handle

        if handle is None or handle._owner != current_async_task_ident():
            msg = "the current task is not holding this mutex"
            raise RuntimeError(msg)

        self.release(handle)

    @overload
    async def acquire(
        self,
        /,
        *,
        blocking: Literal[True] = True,
    ) -> ReleaseHandle: ...
    @overload
    async def acquire(self, /, *, blocking: bool) -> ReleaseHandle | None: ...
    async def acquire(self, /, *, blocking=True):
        """
        Acquire the mutex and return the handle that releases it.

        If the mutex is free, it is taken without suspending the current task
        (unless checkpoints are enabled, see
        :func:`aiomutex.lowlevel.async_checkpoint`). Otherwise the task joins
        the end of the waiting queue and is resumed once every earlier waiter
        has had its turn; by then it already owns the mutex.

        With ``blocking=False``, returns :data:`None` instead of waiting.

        If the waiting task is cancelled, it leaves the queue. If the
        cancellation arrives after the ownership was handed to it, the
        cancellation still propagates and the ownership goes on to the next
        waiter.

        Raises:
          MutexDestroyedError:
            if the mutex is closed, or gets closed while waiting.
          RuntimeError:
            if the current task already holds the mutex.
        """

        if self._closed:
            msg = "acquire on a closed mutex"
            raise MutexDestroyedError(msg)

        task = current_async_task()
        ident = current_async_task_ident()

        if (handle := self._handle) is not None and handle._owner == ident:
            msg = "the current task is already holding this mutex"
            raise RuntimeError(msg)

        if not self._locked:
            self._locked = True
            self._handle = handle = _create_handle(self, ident, task)

            if blocking:
                try:
                    await async_checkpoint()
                except BaseException:
                    self.release(handle)
                    raise

            return handle

        if not blocking:
            return None

        # token[3] receives the handle before the waiter is resumed
        self._waiters.append(
            token := [
                event := create_async_event(),
                ident,
                task,
                None,
            ]
        )

        success = False

        try:
            success = await event
        finally:
            if not success:
                if event.cancelled():
                    try:
                        self._waiters.remove(token)
                    except ValueError:
                        pass
                elif token[3] is not None:
                    _LOGGER.debug(
                        "%r: forwarding ownership granted to a cancelled task",
                        self,
                    )

                    self.release(token[3])

        if (handle := token[3]) is None:
            msg = "the mutex was closed while waiting"
            raise MutexDestroyedError(msg)

        return handle

    def release(self, /, handle: ReleaseHandle) -> None:
        """
        Relinquish the ownership represented by *handle*.

        If tasks are waiting, the ownership passes to the first of them and
        the mutex stays locked; otherwise the mutex becomes unlocked. The
        method never suspends and may be called from any task.

        Raises:
          InvalidReleaseError:
            if *handle* is already consumed or belongs to another mutex.
        """

        if not isinstance(handle, ReleaseHandle) or handle._mutex is not self:
            msg = "the handle does not belong to this mutex"
            raise InvalidReleaseError(msg)

        if handle._consumed:
            msg = "the handle is already released"
            raise InvalidReleaseError(msg)

        handle._consumed = True
        handle._task = None

        waiters = self._waiters

        while waiters:
            token = waiters.popleft()
            event, ident, task, _ = token

            # skips waiters that were cancelled in the meantime
            if event.set():
                token[3] = handle = _create_handle(self, ident, task)
                self._handle = handle
                return

        self._handle = None
        self._locked = False

    def close(self, /) -> None:
        """
        Tear the mutex down.

        Every pending acquisition fails with :exc:`MutexDestroyedError`
        instead of waiting forever, and so does any later one. The current
        holder, if any, can still release its handle. Idempotent.
        """

        if self._closed:
            return

        self._closed = True

        waiters = self._waiters

        if waiters:
            _LOGGER.warning(
                "%r: abandoning %d pending acquisitions",
                self,
                len(waiters),
            )

        while waiters:
            event, _, _, _ = waiters.popleft()
            event.set()

    def locked(self, /) -> bool:
        """
        Return :data:`True` if anyone owns the mutex.

        Example:
            >>> import asyncio
            >>> async def own_the_mutex():
            ...     async with mutex:
            ...         await asyncio.sleep(3600)
            >>> mutex = AsyncMutex()
            >>> mutex.locked()
            False
            >>> task = asyncio.create_task(own_the_mutex())
            >>> await asyncio.sleep(0)
            >>> mutex.locked()
            True
        """

        return self._locked

    def owned(self, /) -> bool:
        """
        Return :data:`True` if the current task owns the mutex.
        """

        if (handle := self._handle) is None:
            return False

        return handle._owner == current_async_task_ident()

    @property
    def owner(self, /) -> tuple[str, int] | None:
        """
        The identifier of the task that owns the mutex, or :data:`None` if no
        one owns it.

        The owner task is kept alive until it releases, so a task that
        finished while holding the mutex is never confused with a newer one.
        """

        if (handle := self._handle) is not None:
            return handle._owner

        return None

    @property
    def waiting(self, /) -> int:
        """
        The current number of tasks waiting to own.

        It represents the length of the waiting queue and thus changes
        immediately.
        """

        return len(self._waiters)

    @property
    def closed(self, /) -> bool:
        """
        :data:`True` once :meth:`close` has been called.
        """

        return self._closed
