#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

from ._libraries import current_async_library


def _current_asyncio_task() -> object:
    global _current_asyncio_task

    from asyncio import current_task as _current_asyncio_task

    return _current_asyncio_task()


def _current_trio_task() -> object:
    global _current_trio_task

    from trio.lowlevel import current_task as _current_trio_task

    return _current_trio_task()


def current_async_task() -> object:
    """
    Return the task object of the running async library that executes the
    caller (an :class:`asyncio.Task` or a :class:`trio.lowlevel.Task`).

    Raises:
      RuntimeError:
        if the current async library is not supported.
    """

    library = current_async_library()

    if library == "asyncio":
        return _current_asyncio_task()

    if library == "trio":
        return _current_trio_task()

    msg = f"unsupported async library {library!r}"
    raise RuntimeError(msg)


def current_async_task_ident() -> tuple[str, int]:
    """
    Return a hashable identifier of the current task: a pair of the library
    name and the task object id.

    It is only unique among tasks that are alive at the same time, which is
    enough to tell the owner of a mutex apart from other tasks.
    """

    library = current_async_library()

    if library == "asyncio":
        return (library, id(_current_asyncio_task()))

    if library == "trio":
        return (library, id(_current_trio_task()))

    msg = f"unsupported async library {library!r}"
    raise RuntimeError(msg)
