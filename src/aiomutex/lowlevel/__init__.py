#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

"""
This package implements the building blocks of :class:`aiomutex.AsyncMutex`:
detection of the running async library, task identification, single-use
continuations (waiters), one-shot events on top of them, and checkpoints.

You can use its contents to create your own primitives on top of the same
scheduler integration.
"""

from ._checkpoints import (
    async_checkpoint as async_checkpoint,
    async_checkpoint_enabled as async_checkpoint_enabled,
    disable_checkpoints as disable_checkpoints,
    enable_checkpoints as enable_checkpoints,
)
from ._events import (
    AsyncEvent as AsyncEvent,
    create_async_event as create_async_event,
)
from ._ident import (
    current_async_task as current_async_task,
    current_async_task_ident as current_async_task_ident,
)
from ._libraries import (
    AsyncLibraryNotFoundError as AsyncLibraryNotFoundError,
    current_async_library as current_async_library,
    current_async_library_tlocal as current_async_library_tlocal,
)
from ._waiters import (
    AsyncWaiter as AsyncWaiter,
    create_async_waiter as create_async_waiter,
)
