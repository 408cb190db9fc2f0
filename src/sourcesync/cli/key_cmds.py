#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Deploy key management commands for sourcesync."""

from __future__ import annotations

import sys

import click
from provide.foundation.cli.decorators import logging_options
from provide.foundation.logger import get_logger
from structlog.typing import FilteringBoundLogger as StructLogger

from sourcesync.config import ConfigurationError, SyncConfig
from sourcesync.errors import KeyProvisioningError
from sourcesync.keys import KeyProvisioner

log: StructLogger = get_logger(__name__)


def _provisioner() -> KeyProvisioner:
    try:
        return KeyProvisioner(SyncConfig.from_env())
    except ConfigurationError as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(2)


@click.group(name="key")
def key_cli():
    """SSH deploy key commands."""


@key_cli.command(name="show")
@click.argument("tenant_id")
@logging_options
def show_public_key(tenant_id: str, **kwargs):
    """Print the tenant's public key, generating a key pair on first use.

    TENANT_ID: The tenant whose deploy key to print

    Example:
        sourcesync key show t1
    """
    try:
        public_key = _provisioner().get_or_create_public_key(tenant_id)
    except KeyProvisioningError as e:
        log.error("Failed to provide public key", tenant_id=tenant_id, error=str(e))
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)
    click.echo(public_key, nl=False)


@key_cli.command(name="path")
@click.argument("identity")
def show_private_key_path(identity: str):
    """Print the private key file a sync for IDENTITY would authenticate with."""
    try:
        path = _provisioner().get_private_key_path(identity)
    except KeyProvisioningError as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)
    click.echo(str(path))
    if not path.exists():
        click.echo("⚠️  Warning: the key file does not exist", err=True)


# 🔼⚙️🔚
