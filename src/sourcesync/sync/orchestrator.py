#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Top-level control of a source synchronization.

``SourceSyncer.sync`` decides between an incremental update and a fresh
shallow clone, drives the SSH key fallback, enforces one deadline over the
whole call and removes partially cloned trees.

Usage:
    syncer = SourceSyncer(SyncConfig.from_env(), logger=build_logger)
    handle = await syncer.sync(descriptor, descriptor.code_source_dir(config), timeout_minutes=10)
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from provide.foundation.logger import get_logger

from sourcesync.auth import AuthResolver, TransferSettings
from sourcesync.config import SyncConfig
from sourcesync.engines.git import GitEngine
from sourcesync.errors import (
    AuthenticationRetryExhaustedError,
    InvalidEndpointError,
    SyncError,
    SyncTimeoutError,
    UnknownSyncError,
)
from sourcesync.events.logger import STEP_CLONE, BuildLogger, failure_tags
from sourcesync.progress import Deadline, ProgressRelay
from sourcesync.protocols import CloneOptions, CommitInfo, PullOptions, RepositoryHandle, SourceTransport
from sourcesync.sources.descriptor import SourceDescriptor
from sourcesync.sources.endpoint import TransportEndpoint
from sourcesync.sources.filesystem import has_repository_metadata, remove_dir
from sourcesync.sync.classifier import classify
from sourcesync.sync.retry import AuthFallback

log = get_logger(__name__)

T = TypeVar("T")

# How long a timed-out worker gets to notice the cancelled deadline.
ABORT_GRACE_SECONDS = 5.0


class SourceSyncer:
    """Synchronizes descriptors into local working trees."""

    def __init__(
        self,
        config: SyncConfig | None = None,
        *,
        transport: SourceTransport | None = None,
        resolver: AuthResolver | None = None,
        logger: BuildLogger | None = None,
    ) -> None:
        self._config = config or SyncConfig.from_env()
        self._transport = transport or GitEngine()
        self._resolver = resolver or AuthResolver(self._config)
        self._logger = logger

    @property
    def config(self) -> SyncConfig:
        return self._config

    async def sync(
        self,
        descriptor: SourceDescriptor,
        destination: Path | str,
        timeout_minutes: int = 1,
    ) -> RepositoryHandle:
        """Bring ``destination`` to the tip of the descriptor's branch.

        An existing checkout is updated in place; if that fails for any reason
        the directory is emptied and cloned afresh.

        Raises:
            SyncError: the classified failure of the clone.
        """
        destination = Path(destination)
        deadline = Deadline.from_minutes(timeout_minutes)
        sync_log = log.bind(
            tenant_id=descriptor.tenant_id,
            service_id=descriptor.service_id,
            repository_url=descriptor.repository_url,
        )

        with ProgressRelay(self._logger, deadline) as relay:
            if has_repository_metadata(destination):
                try:
                    return await self._pull(descriptor, destination, deadline, relay)
                except SyncError as e:
                    sync_log.error("Updating the source failed, cloning afresh", error=str(e), kind=e.kind.value)

            try:
                await asyncio.to_thread(remove_dir, destination)
            except OSError as e:
                sync_log.error("Failed to empty the source directory", path=str(destination), error=str(e))
                self._report_error("Failed to empty the code directory.")

            return await self._clone(descriptor, destination, deadline, relay)

    async def clone(
        self,
        descriptor: SourceDescriptor,
        destination: Path | str,
        timeout_minutes: int = 1,
    ) -> RepositoryHandle:
        """Shallow-clone into ``destination`` without trying an update first."""
        deadline = Deadline.from_minutes(timeout_minutes)
        with ProgressRelay(self._logger, deadline) as relay:
            return await self._clone(descriptor, Path(destination), deadline, relay)

    async def pull(
        self,
        descriptor: SourceDescriptor,
        destination: Path | str,
        timeout_minutes: int = 1,
    ) -> RepositoryHandle:
        """Update an existing checkout; never falls back to a clone."""
        deadline = Deadline.from_minutes(timeout_minutes)
        with ProgressRelay(self._logger, deadline) as relay:
            try:
                return await self._pull(descriptor, Path(destination), deadline, relay)
            except SyncError as e:
                self._report_error(e.message)
                raise

    async def last_commit(self, repository_path: Path | str) -> CommitInfo:
        return await asyncio.to_thread(self._transport.last_commit, Path(repository_path))

    async def _clone(
        self,
        descriptor: SourceDescriptor,
        destination: Path,
        deadline: Deadline,
        relay: ProgressRelay,
    ) -> RepositoryHandle:
        options = CloneOptions(url=descriptor.repository_url, branch=descriptor.branch or None)

        def attempt(settings: TransferSettings) -> RepositoryHandle:
            # A rejected first attempt leaves an initialized repository behind.
            remove_dir(destination)
            return self._transport.clone(destination, options, settings, relay, deadline)

        try:
            return await self._with_auth_fallback(
                descriptor,
                attempt,
                deadline,
                start_message=f"Start fetching code from Git source ({descriptor.repository_url})",
            )
        except SyncError as e:
            await self._discard_partial_clone(destination)
            self._report_error(e.message)
            raise

    async def _pull(
        self,
        descriptor: SourceDescriptor,
        destination: Path,
        deadline: Deadline,
        relay: ProgressRelay,
    ) -> RepositoryHandle:
        options = PullOptions(url=descriptor.repository_url, branch=descriptor.branch or None)

        def attempt(settings: TransferSettings) -> RepositoryHandle:
            return self._transport.pull(destination, options, settings, relay, deadline)

        return await self._with_auth_fallback(
            descriptor,
            attempt,
            deadline,
            start_message=f"Start updating code from Git source ({descriptor.repository_url})",
        )

    async def _with_auth_fallback(
        self,
        descriptor: SourceDescriptor,
        attempt: Callable[[TransferSettings], T],
        deadline: Deadline,
        start_message: str,
    ) -> T:
        endpoint = self._endpoint(descriptor)
        fallback = AuthFallback(descriptor.tenant_id, self._config.fallback_identity)

        while True:
            self._report_info(start_message)
            try:
                settings = self._resolver.resolve(endpoint, descriptor, fallback.identity)
                return await self._run_blocking(lambda: attempt(settings), deadline)
            except Exception as e:
                error = classify(e, branch=descriptor.branch or None, timeout_minutes=deadline.timeout_minutes)
                if fallback.advance(error):
                    continue
                if fallback.exhausted:
                    raise AuthenticationRetryExhaustedError() from error
                if error is e:
                    raise
                raise error from e

    async def _run_blocking(self, func: Callable[[], T], deadline: Deadline) -> T:
        """Run ``func`` in a worker thread, giving up when ``deadline`` passes.

        On expiry the deadline is cancelled and the worker gets
        ``ABORT_GRACE_SECONDS`` to stop at its next transport callback, so
        cleanup by the caller runs after it. A worker blocked inside libgit2
        with no callbacks firing cannot be stopped: it keeps running past the
        grace period and may write into the destination after the caller has
        removed it. The next sync then finds no ``.git`` or a broken checkout
        and clones afresh.
        """
        deadline.check()
        task = asyncio.ensure_future(asyncio.to_thread(func))
        done, _ = await asyncio.wait({task}, timeout=deadline.remaining())
        if task in done:
            return task.result()

        deadline.cancel()
        log.warning("Deadline reached, aborting transfer", timeout_minutes=deadline.timeout_minutes)
        done, _ = await asyncio.wait({task}, timeout=ABORT_GRACE_SECONDS)
        if task in done:
            _consume_outcome(task)
        else:
            task.add_done_callback(_consume_outcome)
        raise SyncTimeoutError(deadline.timeout_minutes)

    def _endpoint(self, descriptor: SourceDescriptor) -> TransportEndpoint:
        try:
            return descriptor.endpoint()
        except InvalidEndpointError as e:
            raise UnknownSyncError(e) from e

    async def _discard_partial_clone(self, destination: Path) -> None:
        try:
            await asyncio.to_thread(remove_dir, destination)
        except OSError as e:
            log.error("Failed to remove source directory after clone error", path=str(destination), error=str(e))
            self._report_error("Failed to remove the code directory after a fetch error.")

    def _report_info(self, message: str) -> None:
        if self._logger is not None:
            self._logger.info(message, {"step": STEP_CLONE})

    def _report_error(self, message: str) -> None:
        if self._logger is not None:
            self._logger.error(message, failure_tags())


def _consume_outcome(task: asyncio.Future) -> None:
    if not task.cancelled() and task.exception() is not None:
        log.debug("Aborted transfer finished with error", error=str(task.exception()))


def sync_source(
    descriptor: SourceDescriptor,
    destination: Path | str,
    timeout_minutes: int = 1,
    *,
    config: SyncConfig | None = None,
    logger: BuildLogger | None = None,
) -> RepositoryHandle:
    """Blocking wrapper around :meth:`SourceSyncer.sync` for synchronous callers."""
    syncer = SourceSyncer(config, logger=logger)
    return asyncio.run(syncer.sync(descriptor, destination, timeout_minutes))


# 🔼⚙️🔚
