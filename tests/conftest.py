#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Shared pytest fixtures for sourcesync."""

from __future__ import annotations

from pathlib import Path
import subprocess

import pytest

from sourcesync.config import SyncConfig
from sourcesync.sources import SourceDescriptor
from tests.helpers.fakes import FakeTransport, RecordingBuildLogger
from tests.helpers.git import run_git


@pytest.fixture
def home_dir(tmp_path: Path) -> Path:
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def sync_config(tmp_path: Path, home_dir: Path) -> SyncConfig:
    """Configuration rooted entirely under the test's temporary directory."""
    return SyncConfig(
        cache_dir=tmp_path / "cache",
        source_dir=tmp_path / "source",
        home_dir=home_dir,
    )


@pytest.fixture
def ssh_dir(sync_config: SyncConfig) -> Path:
    path = sync_config.ssh_dir
    path.mkdir(parents=True, exist_ok=True)
    return path


@pytest.fixture
def build_logger() -> RecordingBuildLogger:
    return RecordingBuildLogger()


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def descriptor() -> SourceDescriptor:
    return SourceDescriptor(
        repository_url="https://github.com/acme/app.git",
        tenant_id="tenant-1",
        service_id="web",
    )


@pytest.fixture
def upstream_repo(tmp_path: Path) -> Path:
    """A bare repository with ``main`` (default), ``develop`` and tag ``v1``.

    The working repository it was created from lives next to it at
    ``<tmp>/upstream-work`` and has the bare repository as remote ``upstream``.
    """
    try:
        subprocess.run(["git", "--version"], check=True, capture_output=True)
    except (subprocess.CalledProcessError, FileNotFoundError):
        pytest.skip("Git not available for testing")

    work = tmp_path / "upstream-work"
    work.mkdir()
    run_git("init", cwd=work)
    run_git("symbolic-ref", "HEAD", "refs/heads/main", cwd=work)
    run_git("config", "user.name", "Sourcesync Test Bot", cwd=work)
    run_git("config", "user.email", "test@sourcesync.example.com", cwd=work)
    # Disable GPG signing to prevent tests from failing if user has global GPG config
    run_git("config", "commit.gpgsign", "false", cwd=work)
    run_git("config", "tag.gpgsign", "false", cwd=work)

    (work / "README.md").write_text("initial commit\n")
    run_git("add", "README.md", cwd=work)
    run_git("commit", "-m", "Initial commit", cwd=work)
    run_git("tag", "v1", cwd=work)

    run_git("checkout", "-b", "develop", cwd=work)
    (work / "DEVELOP.md").write_text("develop only\n")
    run_git("add", "DEVELOP.md", cwd=work)
    run_git("commit", "-m", "Develop work", cwd=work)
    run_git("checkout", "main", cwd=work)

    bare = tmp_path / "upstream.git"
    run_git("clone", "--bare", str(work), str(bare), cwd=tmp_path)
    run_git("remote", "add", "upstream", str(bare), cwd=work)
    return bare


# 🔼⚙️🔚
