#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

"""
Fair async mutex for cooperatively scheduled event loops

This package provides a mutual exclusion lock for tasks that run on one
event loop (asyncio, Trio, or AnyIO on top of either) and interleave at
``await`` points:

* uncontended acquisitions never suspend
* waiters are served strictly in arrival order
* ownership is handed directly from the releaser to the next waiter
* every acquisition yields a one-shot release handle, and double releases
  are reported instead of silently unlocking someone else's critical section
"""

__author__: str = "Ilya Egorov <0x42005e1f@gmail.com>"
__version__: str = "0.1.0"

from . import (  # noqa: F401
    lowlevel,
    meta,
)
from ._mutex import (
    AsyncMutex as AsyncMutex,
    InvalidReleaseError as InvalidReleaseError,
    MutexDestroyedError as MutexDestroyedError,
    ReleaseHandle as ReleaseHandle,
    UsageError as UsageError,
)

# prepare for external use
meta.export(globals())
