#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: 0BSD

import pytest

import aiomutex


def test_no_library():
    with pytest.raises(aiomutex.lowlevel.AsyncLibraryNotFoundError):
        aiomutex.lowlevel.current_async_library()

    assert aiomutex.lowlevel.current_async_library(failsafe=True) is None


def test_tlocal():
    tlocal = aiomutex.lowlevel.current_async_library_tlocal

    tlocal.name = "someio"

    try:
        assert aiomutex.lowlevel.current_async_library() == "someio"
    finally:
        tlocal.name = None


async def test_running_library(asynclib):
    library = aiomutex.lowlevel.current_async_library()

    assert library == asynclib.backend
    assert aiomutex.lowlevel.current_async_library(failsafe=True) == library
