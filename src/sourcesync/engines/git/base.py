#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""pygit2-backed transport: shallow single-branch clone and fast update."""

from __future__ import annotations

from pathlib import Path

import pygit2
from pygit2.enums import CheckoutStrategy
from provide.foundation.logger import get_logger

from sourcesync.auth.credentials import TransferSettings
from sourcesync.engines.git.callbacks import SyncCallbacks
from sourcesync.engines.git.operations import GitOperationsHelper
from sourcesync.errors import BranchNotFoundError, EmptyRepositoryError
from sourcesync.progress.deadline import Deadline
from sourcesync.progress.relay import ProgressRelay
from sourcesync.protocols import CloneOptions, CommitInfo, PullOptions, RepositoryHandle
from sourcesync.sources.endpoint import parse_endpoint

log = get_logger(__name__)

REMOTE_NAME = "origin"
HEADS_PREFIX = "refs/heads/"


class WorkingTreeMismatchError(Exception):
    """The local checkout cannot be updated in place."""


class GitEngine:
    """Runs clone and pull through pygit2.

    Every network call receives its own callbacks and proxy; nothing is
    registered process-wide. Methods block and are meant for a worker thread.
    """

    def __init__(self) -> None:
        self._log = log.bind(engine_id=id(self))
        self._ops = GitOperationsHelper()

    def clone(
        self,
        destination: Path,
        options: CloneOptions,
        settings: TransferSettings,
        relay: ProgressRelay,
        deadline: Deadline,
    ) -> RepositoryHandle:
        if options.recurse_submodules:
            raise ValueError("Submodule checkout is not supported")
        protocol = parse_endpoint(options.url).protocol
        destination.mkdir(parents=True, exist_ok=True)
        repo = pygit2.init_repository(str(destination), bare=False)
        remote = repo.remotes.create(REMOTE_NAME, options.url)

        heads = self._list_heads(remote, settings, relay, deadline, protocol)
        if not any(name.startswith(HEADS_PREFIX) for name in heads):
            raise EmptyRepositoryError()
        branch = options.branch or _default_branch(heads)
        if HEADS_PREFIX + branch not in heads:
            raise BranchNotFoundError(branch)

        refspec = _branch_refspec(branch) if options.single_branch else _all_branches_refspec()
        repo.config[f"remote.{REMOTE_NAME}.fetch"] = refspec
        if not options.tags:
            repo.config[f"remote.{REMOTE_NAME}.tagOpt"] = "--no-tags"
        # Reload so the remote picks up the tag option from config.
        remote = repo.remotes[REMOTE_NAME]

        self._log.debug(
            "Fetching",
            url=options.url,
            branch=branch,
            depth=options.depth,
            single_branch=options.single_branch,
            tags=options.tags,
            proxied=settings.proxy_url is not None,
        )
        self._fetch(remote, [refspec], settings, relay, deadline, protocol, options.depth)

        commit = repo[_remote_target(repo, branch)].peel(pygit2.Commit)
        local = repo.branches.local.create(branch, commit)
        local.upstream = repo.branches.remote[f"{REMOTE_NAME}/{branch}"]
        repo.checkout(local, strategy=CheckoutStrategy.FORCE)

        self._log.info("Clone finished", url=options.url, branch=branch, head=str(commit.id))
        return RepositoryHandle(path=destination, head=str(commit.id), branch=branch)

    def pull(
        self,
        destination: Path,
        options: PullOptions,
        settings: TransferSettings,
        relay: ProgressRelay,
        deadline: Deadline,
    ) -> RepositoryHandle:
        repo = self._ops.get_repo(destination)
        if repo.head_is_unborn or repo.head_is_detached:
            raise WorkingTreeMismatchError("HEAD does not point at a local branch")

        current = repo.head.shorthand
        branch = options.branch or current
        if branch != current:
            raise WorkingTreeMismatchError(f"checked out branch '{current}' differs from '{branch}'")

        remote = repo.remotes[REMOTE_NAME]
        if remote.url != options.url:
            raise WorkingTreeMismatchError(f"checkout tracks '{remote.url}', not '{options.url}'")
        protocol = parse_endpoint(remote.url).protocol
        heads = self._list_heads(remote, settings, relay, deadline, protocol)
        if HEADS_PREFIX + branch not in heads:
            raise BranchNotFoundError(branch)

        self._fetch(remote, [_branch_refspec(branch)], settings, relay, deadline, protocol, options.depth)

        remote_oid = _remote_target(repo, branch)
        if remote_oid == repo.head.target:
            self._log.info("Already up to date", branch=branch, head=str(remote_oid))
            return RepositoryHandle(path=destination, head=str(remote_oid), branch=branch, up_to_date=True)

        # SAFE refuses to clobber local edits; the caller then resyncs from scratch.
        repo.checkout_tree(repo[remote_oid], strategy=CheckoutStrategy.SAFE)
        repo.lookup_reference(HEADS_PREFIX + branch).set_target(remote_oid, "sourcesync: update")

        self._log.info("Working tree updated", branch=branch, head=str(remote_oid))
        return RepositoryHandle(path=destination, head=str(remote_oid), branch=branch)

    def last_commit(self, repository_path: Path) -> CommitInfo:
        return self._ops.last_commit(repository_path)

    def _list_heads(
        self,
        remote: pygit2.Remote,
        settings: TransferSettings,
        relay: ProgressRelay,
        deadline: Deadline,
        protocol: str,
    ) -> dict[str, tuple[str, str | None]]:
        """Advertised refs as ``{name: (oid, symref_target)}``."""
        callbacks = SyncCallbacks(settings, relay, deadline, protocol)
        heads = remote.list_heads(callbacks=callbacks, proxy=settings.proxy_url)
        return {head.name: (str(head.oid), head.symref_target or None) for head in heads}

    def _fetch(
        self,
        remote: pygit2.Remote,
        refspecs: list[str],
        settings: TransferSettings,
        relay: ProgressRelay,
        deadline: Deadline,
        protocol: str,
        depth: int,
    ) -> None:
        if protocol == "file" and depth:
            # libgit2's local transport cannot negotiate shallow fetches.
            self._log.debug("Local transport, fetching full history", requested_depth=depth)
            depth = 0
        callbacks = SyncCallbacks(settings, relay, deadline, protocol)
        remote.fetch(refspecs, callbacks=callbacks, proxy=settings.proxy_url, depth=depth)


def _branch_refspec(branch: str) -> str:
    return f"+{HEADS_PREFIX}{branch}:refs/remotes/{REMOTE_NAME}/{branch}"


def _all_branches_refspec() -> str:
    return f"+{HEADS_PREFIX}*:refs/remotes/{REMOTE_NAME}/*"


def _remote_target(repo: pygit2.Repository, branch: str) -> pygit2.Oid:
    ref_name = f"refs/remotes/{REMOTE_NAME}/{branch}"
    try:
        return repo.references[ref_name].target
    except KeyError as e:
        raise BranchNotFoundError(branch) from e


def _default_branch(heads: dict[str, tuple[str, str | None]]) -> str | None:
    """Branch the remote HEAD points at, falling back to a head with the same commit."""
    branches = sorted(name for name in heads if name.startswith(HEADS_PREFIX))
    if not branches:
        return None

    head = heads.get("HEAD")
    if head is not None:
        oid, symref = head
        if symref and symref.startswith(HEADS_PREFIX) and symref in heads:
            return symref[len(HEADS_PREFIX) :]
        same_commit = [name for name in branches if heads[name][0] == oid]
        for preferred in ("main", "master"):
            if HEADS_PREFIX + preferred in same_commit:
                return preferred
        if same_commit:
            return same_commit[0][len(HEADS_PREFIX) :]

    for preferred in ("main", "master"):
        if HEADS_PREFIX + preferred in heads:
            return preferred
    return branches[0][len(HEADS_PREFIX) :]


# 🔼⚙️🔚
