#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Local repository helpers for the GitEngine."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import pygit2
from provide.foundation.logger import get_logger

from sourcesync.protocols import CommitInfo

log = get_logger(__name__)


class GitOperationsHelper:
    """Helper class for read-only operations on a local repository."""

    def __init__(self) -> None:
        self._log = log.bind(helper_id=id(self))
        self._log.debug("GitOperationsHelper initialized")

    def get_repo(self, working_dir: Path) -> pygit2.Repository:
        """Helper to get the pygit2 Repository object."""
        try:
            return pygit2.Repository(str(working_dir))
        except pygit2.GitError as e:
            self._log.error("Failed to open Git repository", path=str(working_dir), error=str(e))
            raise

    def last_commit(self, working_dir: Path) -> CommitInfo:
        """Commit that HEAD points at.

        Raises:
            KeyError: if the repository has no commits yet.
        """
        repo = self.get_repo(working_dir)
        if repo.is_empty or repo.head_is_unborn:
            raise KeyError(f"Repository at {working_dir} has no commits")

        commit = repo.head.peel(pygit2.Commit)
        author = commit.author
        return CommitInfo(
            hash=str(commit.id),
            author_name=author.name if author else "Unknown",
            author_email=author.email if author else "",
            message=commit.message or "",
            committed_at=datetime.fromtimestamp(commit.commit_time, tz=UTC),
        )


# 🔼⚙️🔚
