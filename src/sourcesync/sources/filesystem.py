#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Filesystem helpers for working trees."""

from __future__ import annotations

from pathlib import Path
import shutil

from sourcesync.errors import UnsafeRemovalError


def has_repository_metadata(path: Path) -> bool:
    """True when ``path`` holds a git working tree (``.git`` entry present)."""
    return (path / ".git").exists()


def remove_dir(path: Path) -> None:
    """Recursively delete ``path``; a missing directory is not an error.

    Only the filesystem root is refused. This is a last-ditch guard and not a
    confinement boundary: callers decide which directories are theirs.
    """
    resolved = path.resolve()
    if resolved == Path(resolved.anchor) or str(path) in ("", "/"):
        raise UnsafeRemovalError(str(path))
    if not path.exists() and not path.is_symlink():
        return
    if path.is_symlink() or path.is_file():
        path.unlink()
        return
    shutil.rmtree(path)


# 🔼⚙️🔚
