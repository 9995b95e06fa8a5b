#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

from typing import Final

# (library, backend): the library the test code talks to, and the event
# loop it runs on
ASYNC_PAIRS: Final[tuple[tuple[str, str], ...]] = (
    ("asyncio", "asyncio"),
    ("trio", "trio"),
    ("anyio", "asyncio"),
    ("anyio", "trio"),
)


def format_pair(library: str, backend: str, /) -> str:
    """
    Return the test id of the pair: ``"trio"`` or ``"anyio+trio"``.
    """

    if library == backend:
        return library

    return f"{library}+{backend}"


def parse_pair(pair_id: str, /) -> tuple[str, str]:
    """
    The inverse of :func:`format_pair`.
    """

    library, _, backend = pair_id.partition("+")

    return (library, backend or library)


ASYNC_PAIR_IDS: Final[tuple[str, ...]] = tuple(
    format_pair(library, backend) for library, backend in ASYNC_PAIRS
)
