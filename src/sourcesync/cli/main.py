#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Entry point for the sourcesync command line."""

from __future__ import annotations

import click

from sourcesync import __version__
from sourcesync.cli.key_cmds import key_cli
from sourcesync.cli.sync_cmds import paths_command, sync_command


@click.group(name="sourcesync")
@click.version_option(version=__version__, prog_name="sourcesync")
def cli():
    """sourcesync: per-tenant git source synchronization for builds."""


cli.add_command(sync_command)
cli.add_command(paths_command)
cli.add_command(key_cli)


if __name__ == "__main__":
    cli()

# 🔼⚙️🔚
