#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: 0BSD

import pickle

import anyio
import pytest

import aiomutex


class TestAsyncEvent:
    factory = staticmethod(aiomutex.lowlevel.create_async_event)

    def test_base(self, /):
        event = self.factory()

        assert isinstance(event, aiomutex.lowlevel.AsyncEvent)
        assert not event
        assert not event.is_set()
        assert not event.cancelled()
        assert repr(event).endswith(": unset>")

        assert event.set()
        assert not event.set()

        assert event
        assert event.is_set()
        assert not event.cancelled()
        assert repr(event).endswith(": set>")

    def test_no_pickle(self, /):
        with pytest.raises(TypeError):
            pickle.dumps(self.factory())

    async def test_set_before_await(self, /):
        event = self.factory()

        event.set()

        assert await event is True

    async def test_set_while_waiting(self, /):
        event = self.factory()
        results = []

        async def waiter(*, task_status=anyio.TASK_STATUS_IGNORED):
            task_status.started()

            results.append(await event)

        async with anyio.create_task_group() as tg:
            await tg.start(waiter)

            assert event.set()

        assert results == [True]

    async def test_cancelled(self, /):
        event = self.factory()
        scopes = []

        async def waiter(*, task_status=anyio.TASK_STATUS_IGNORED):
            with anyio.CancelScope() as scope:
                scopes.append(scope)
                task_status.started()

                await event

        async with anyio.create_task_group() as tg:
            await tg.start(waiter)

            scopes[0].cancel()

        assert event.cancelled()
        assert not event.is_set()
        assert repr(event).endswith(": cancelled>")

        assert not event.set()
        assert await event is False

    async def test_cancel_then_set(self, /):
        event = self.factory()
        scopes = []

        async def waiter(*, task_status=anyio.TASK_STATUS_IGNORED):
            with anyio.CancelScope() as scope:
                scopes.append(scope)
                task_status.started()

                await event

        async with anyio.create_task_group() as tg:
            await tg.start(waiter)

            # the waiter has not resumed yet
            scopes[0].cancel()

            assert event.cancelled()
            assert not event.set()
            assert not event.is_set()

        assert scopes[0].cancelled_caught
        assert event.cancelled()

    async def test_single_waiter(self, /):
        event = self.factory()

        async with anyio.create_task_group() as tg:
            tg.start_soon(_await, event)

            await anyio.wait_all_tasks_blocked()

            with pytest.raises(RuntimeError, match="already in use"):
                await event

            event.set()


async def _await(awaitable):
    await awaitable
