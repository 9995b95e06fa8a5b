#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from types import FunctionType, ModuleType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    if sys.version_info >= (3, 9):  # PEP 585
        from collections.abc import MutableMapping
    else:
        from typing import MutableMapping


def _issubmodule(module_name: str | None, package_name: str, /) -> bool:
    return module_name is not None and (
        module_name == package_name
        or module_name.startswith(f"{package_name}.")
    )


def _export_one(package_name: str, name: str, value: object, /) -> None:
    # Only classes and functions defined inside the package are renamed;
    # foreign objects (e.g. re-exported sniffio exceptions) are left alone.
    if isinstance(value, (type, FunctionType)):
        if not _issubmodule(value.__module__, package_name):
            return

        value.__name__ = name
        value.__qualname__ = name
        value.__module__ = package_name


def export(
    package_namespace: ModuleType | MutableMapping[str, object],
    /,
) -> None:
    """
    Prepare *package_namespace* for external use.

    Every public member defined in a non-public submodule gets its
    ``__module__`` rewritten to the package itself, so that representations
    and tracebacks show ``aiomutex.AsyncMutex`` instead of
    ``aiomutex._mutex.AsyncMutex``. Public subpackages are processed
    recursively, and a sorted :keyword:`__all__ <import>` is built for each.

    Typically called as ``export(globals())`` at the end of ``__init__.py``.
    """

    if TYPE_CHECKING:
        return

    if isinstance(package_namespace, ModuleType):
        package_name = package_namespace.__name__
        package_namespace = vars(package_namespace)
    else:
        package_name = package_namespace["__name__"]

    public_names = []

    for name, value in {**package_namespace}.items():
        if name.startswith("_"):
            continue

        if isinstance(value, ModuleType):
            if value.__name__.rpartition(".")[0] == package_name:
                export(value)
        else:
            public_names.append(name)

            _export_one(package_name, name, value)

    public_names.sort()
    public_names.sort(key=str.isupper, reverse=True)

    package_namespace.setdefault("__all__", tuple(public_names))
