#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Source synchronization commands for sourcesync."""

from __future__ import annotations

import asyncio
from pathlib import Path
import sys

import click
from provide.foundation.cli.decorators import logging_options
from provide.foundation.logger import get_logger
from structlog.typing import FilteringBoundLogger as StructLogger

from sourcesync.config import ConfigurationError, SyncConfig
from sourcesync.errors import SyncError
from sourcesync.events import FoundationBuildLogger
from sourcesync.sources import SourceDescriptor
from sourcesync.sync import SourceSyncer

log: StructLogger = get_logger(__name__)


def _load_config() -> SyncConfig:
    try:
        return SyncConfig.from_env()
    except ConfigurationError as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(2)


@click.command(name="sync")
@click.option("--url", "repository_url", required=True, help="Repository URL (ssh, http or https).")
@click.option("--branch", default="", help="Branch to check out. Defaults to the remote's default branch.")
@click.option("--user", default="", envvar="SOURCESYNC_USER", help="HTTP basic auth user.")
@click.option(
    "--password",
    default="",
    envvar="SOURCESYNC_PASSWORD",
    help="HTTP basic auth password (env var SOURCESYNC_PASSWORD).",
    show_envvar=True,
)
@click.option("--tenant", "tenant_id", required=True, help="Tenant that owns the build.")
@click.option("--service", "service_id", required=True, help="Service being built.")
@click.option(
    "--dest",
    type=click.Path(file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help="Working tree location. Defaults to <SOURCE_DIR>/build/<tenant>/<service>.",
)
@click.option("--timeout", "timeout_minutes", type=int, default=10, show_default=True, help="Minutes.")
@logging_options
def sync_command(
    repository_url: str,
    branch: str,
    user: str,
    password: str,
    tenant_id: str,
    service_id: str,
    dest: Path | None,
    timeout_minutes: int,
    **kwargs,
):
    """Clone or update a repository into the tenant's source directory.

    Example:
        sourcesync sync --url git@github.com:acme/app.git --tenant t1 --service web
    """
    config = _load_config()
    try:
        descriptor = SourceDescriptor(
            repository_url=repository_url,
            tenant_id=tenant_id,
            service_id=service_id,
            branch=branch,
            user=user,
            password=password,
        )
    except ValueError as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(2)

    destination = dest or descriptor.code_source_dir(config)
    build_logger = FoundationBuildLogger(tenant_id=tenant_id, service_id=service_id)
    syncer = SourceSyncer(config, logger=build_logger)

    try:
        handle = asyncio.run(syncer.sync(descriptor, destination, timeout_minutes))
    except SyncError as e:
        log.error("Sync failed", kind=e.kind.value, error=e.message)
        click.echo(f"❌ Error: {e.message}", err=True)
        sys.exit(1)

    state = "already up to date" if handle.up_to_date else "synchronized"
    click.echo(f"✅ {handle.path}: {handle.branch} @ {handle.head[:12]} ({state})")


@click.command(name="paths")
@click.option("--tenant", "tenant_id", required=True)
@click.option("--service", "service_id", required=True)
def paths_command(tenant_id: str, service_id: str):
    """Print the cache and source directories of a tenant's service."""
    config = _load_config()
    try:
        descriptor = SourceDescriptor(repository_url="", tenant_id=tenant_id, service_id=service_id)
    except ValueError as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(2)
    click.echo(f"cache:  {descriptor.code_cache_dir(config)}")
    click.echo(f"source: {descriptor.code_source_dir(config)}")


# 🔼⚙️🔚
