"""Workspace containment checks for status document paths.

Every read and write of a status document goes through is_inside_workspace.
A rejected path must be handled exactly like a missing file, so nothing here
raises and nothing logs the rejected path.
"""

from __future__ import annotations

import os
from pathlib import Path


def _normalize(path: str | os.PathLike) -> str:
    # realpath resolves symlinks along the existing part of the path, so a
    # link inside the workspace that points outside is seen for what it is
    resolved = os.path.realpath(os.path.abspath(os.fspath(path)))
    return os.path.normcase(os.path.normpath(resolved))


def is_inside_workspace(file_path: str | os.PathLike, workspace_root: str | os.PathLike) -> bool:
    """True if file_path is workspace_root or lies beneath it."""
    try:
        if not os.fspath(file_path) or not os.fspath(workspace_root):
            return False
        candidate = _normalize(file_path)
        root = _normalize(workspace_root)
        if candidate == root:
            return True
        prefix = root if root.endswith(os.sep) else root + os.sep
        return candidate.startswith(prefix)
    except (OSError, TypeError, ValueError):
        return False


def get_validated_path(
    file_path: str | os.PathLike, workspace_root: str | os.PathLike
) -> Path | None:
    """Absolute path for file_path, or None when it escapes the workspace."""
    if not is_inside_workspace(file_path, workspace_root):
        return None
    return Path(os.path.abspath(os.fspath(file_path)))
