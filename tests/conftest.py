#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: 0BSD

import inspect

from functools import partial, wraps
from types import SimpleNamespace

import pytest

import aiomutex
import aiomutex._testing


def _run_decorator(item):
    func = item.obj

    @wraps(func)
    def wrapper(*args, **kwargs):
        asynclib = item.funcargs["asynclib"]

        return aiomutex._testing.run(
            partial(func, *args, **kwargs),
            library=asynclib.library,
            backend=asynclib.backend,
        )

    return wrapper


@pytest.fixture(autouse=True)
def asynclib(request):
    param = getattr(request, "param", None)

    if param is None:  # a synchronous test
        return None

    library, backend = aiomutex._testing.parse_pair(param)

    pytest.importorskip(backend)
    pytest.importorskip(library)

    return SimpleNamespace(library=library, backend=backend)


def pytest_generate_tests(metafunc):
    if inspect.iscoroutinefunction(metafunc.function):
        metafunc.parametrize(
            "asynclib",
            aiomutex._testing.ASYNC_PAIR_IDS,
            indirect=True,
        )


def pytest_collection_modifyitems(config, items):
    for item in items:
        if inspect.iscoroutinefunction(getattr(item, "obj", None)):
            item.obj = _run_decorator(item)
