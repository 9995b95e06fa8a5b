#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: 0BSD

import anyio
import pytest

import aiomutex


def test_no_library():
    with pytest.raises(aiomutex.lowlevel.AsyncLibraryNotFoundError):
        aiomutex.lowlevel.create_async_waiter()


async def test_wake():
    results = []
    waiters = []

    async def sleeper(*, task_status=anyio.TASK_STATUS_IGNORED):
        waiter = aiomutex.lowlevel.create_async_waiter()
        waiters.append(waiter)
        task_status.started()

        results.append(await waiter)

    async with anyio.create_task_group() as tg:
        await tg.start(sleeper)
        await anyio.wait_all_tasks_blocked()

        assert not results

        waiters[0].wake()
        waiters[0].wake()  # no-op

        assert not results  # resumed on a later turn
        assert not waiters[0].cancelled()

    assert results == [True]


async def test_wake_from_thread():
    results = []
    waiters = []

    async def sleeper(*, task_status=anyio.TASK_STATUS_IGNORED):
        waiter = aiomutex.lowlevel.create_async_waiter()
        waiters.append(waiter)
        task_status.started()

        results.append(await waiter)

    async with anyio.create_task_group() as tg:
        await tg.start(sleeper)
        await anyio.wait_all_tasks_blocked()
        await anyio.to_thread.run_sync(waiters[0].wake)

    assert results == [True]


async def test_cancel():
    results = []
    waiters = []

    async def sleeper():
        with anyio.CancelScope() as scope:
            scopes.append(scope)
            waiters.append(waiter := aiomutex.lowlevel.create_async_waiter())

            await waiter

            results.append(None)

    scopes = []

    async with anyio.create_task_group() as tg:
        tg.start_soon(sleeper)

        await anyio.wait_all_tasks_blocked()

        scopes[0].cancel()

        assert waiters[0].cancelled()

        waiters[0].wake()  # the wakeup is lost

    assert scopes[0].cancelled_caught
    assert not results
    assert waiters[0].cancelled()
