#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Option records, results and the transport protocol the orchestrator drives."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from attrs import define

if TYPE_CHECKING:
    from sourcesync.auth.credentials import TransferSettings
    from sourcesync.progress.deadline import Deadline
    from sourcesync.progress.relay import ProgressRelay

SHALLOW_DEPTH = 1


@define(frozen=True)
class CloneOptions:
    """What a clone asks the remote for.

    ``branch=None`` means the remote's default branch.
    """

    url: str
    branch: str | None = None
    depth: int = SHALLOW_DEPTH
    single_branch: bool = True
    tags: bool = False
    # Fetches never descend into submodules; the engine rejects True.
    recurse_submodules: bool = False


@define(frozen=True)
class PullOptions:
    """What an incremental update asks the remote for.

    ``url`` must match the checkout's ``origin``; ``branch=None`` means the
    branch currently checked out.
    """

    url: str
    branch: str | None = None
    depth: int = SHALLOW_DEPTH
    single_branch: bool = True


@define(frozen=True)
class RepositoryHandle:
    """A synchronized working tree."""

    path: Path
    head: str
    branch: str
    up_to_date: bool = False


@define(frozen=True)
class CommitInfo:
    hash: str
    author_name: str
    author_email: str
    message: str
    committed_at: datetime

    @property
    def summary(self) -> str:
        return self.message.split("\n", 1)[0]


@runtime_checkable
class SourceTransport(Protocol):
    """Blocking git operations. Implementations run inside a worker thread."""

    def clone(
        self,
        destination: Path,
        options: CloneOptions,
        settings: TransferSettings,
        relay: ProgressRelay,
        deadline: Deadline,
    ) -> RepositoryHandle: ...

    def pull(
        self,
        destination: Path,
        options: PullOptions,
        settings: TransferSettings,
        relay: ProgressRelay,
        deadline: Deadline,
    ) -> RepositoryHandle: ...

    def last_commit(self, repository_path: Path) -> CommitInfo: ...


# 🔼⚙️🔚
