"""
Path utilities for template imports.

Imports always use POSIX semantics regardless of the host platform:
a path is absolute when it starts with a separator, and joining is
plain segment concatenation.
"""

from __future__ import annotations

import posixpath


def is_absolute(path: str) -> bool:
    """True for paths with a leading separator."""
    return posixpath.isabs(path)


def join(directory: str, path: str) -> str:
    """Joins an import directory and a relative template path."""
    if not directory:
        return path
    return posixpath.join(directory, path)


def resolve_import_path(import_directory: str, path: str) -> str:
    """
    Resolves an import path against the configured import directory.
    Absolute paths are returned untouched.
    """
    if is_absolute(path):
        return path
    return join(import_directory, path)


__all__ = ["is_absolute", "join", "resolve_import_path"]
