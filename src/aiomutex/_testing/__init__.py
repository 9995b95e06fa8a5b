#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

"""
Helpers for running the test suite once per supported async library.
"""

from ._constants import (
    ASYNC_PAIR_IDS as ASYNC_PAIR_IDS,
    ASYNC_PAIRS as ASYNC_PAIRS,
    format_pair as format_pair,
    parse_pair as parse_pair,
)
from ._runners import (
    run as run,
)
