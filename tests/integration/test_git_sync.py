#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""End-to-end syncs through pygit2 against local bare repositories."""

from pathlib import Path

import pygit2
import pytest

from sourcesync.config import SyncConfig
from sourcesync.engines.git import GitEngine
from sourcesync.errors import BranchNotFoundError, EmptyRepositoryError
from sourcesync.sources import SourceDescriptor
from sourcesync.sync import SourceSyncer
from tests.helpers.fakes import RecordingBuildLogger
from tests.helpers.git import run_git

pytestmark = pytest.mark.integration


def _descriptor(upstream: Path, branch: str = "") -> SourceDescriptor:
    return SourceDescriptor(
        repository_url=upstream.as_uri(),
        tenant_id="t1",
        service_id="web",
        branch=branch,
    )


@pytest.fixture
def syncer(sync_config: SyncConfig, build_logger: RecordingBuildLogger) -> SourceSyncer:
    return SourceSyncer(sync_config, transport=GitEngine(), logger=build_logger)


@pytest.fixture
def destination(sync_config: SyncConfig) -> Path:
    return sync_config.source_dir / "build" / "t1" / "web"


class TestClone:
    """Tests for fresh clones."""

    async def test_clones_remote_default_branch(self, syncer: SourceSyncer, upstream_repo: Path, destination):
        handle = await syncer.sync(_descriptor(upstream_repo), destination)

        assert handle.branch == "main"
        assert handle.head == run_git("rev-parse", "main", cwd=upstream_repo)
        assert (destination / "README.md").read_text() == "initial commit\n"
        assert not (destination / "DEVELOP.md").exists()

        repo = pygit2.Repository(str(destination))
        assert repo.head.shorthand == "main"
        assert not repo.head_is_detached

    async def test_fetches_single_branch_without_tags(
        self, syncer: SourceSyncer, upstream_repo: Path, destination
    ):
        await syncer.sync(_descriptor(upstream_repo), destination)

        references = set(pygit2.Repository(str(destination)).references)
        assert "refs/remotes/origin/main" in references
        assert "refs/remotes/origin/develop" not in references
        assert not any(ref.startswith("refs/tags/") for ref in references)

    async def test_clones_named_branch(self, syncer: SourceSyncer, upstream_repo: Path, destination):
        handle = await syncer.sync(_descriptor(upstream_repo, branch="develop"), destination)

        assert handle.branch == "develop"
        assert (destination / "DEVELOP.md").exists()

    async def test_missing_branch_removes_destination(
        self, syncer: SourceSyncer, upstream_repo: Path, destination
    ):
        with pytest.raises(BranchNotFoundError) as exc_info:
            await syncer.sync(_descriptor(upstream_repo, branch="doesnotexist"), destination)

        assert exc_info.value.branch == "doesnotexist"
        assert not destination.exists()

    @pytest.mark.parametrize("branch", ["", "main"])
    async def test_empty_repository(
        self, syncer: SourceSyncer, tmp_path: Path, upstream_repo, destination, branch: str
    ):
        empty = tmp_path / "empty.git"
        run_git("init", "--bare", str(empty), cwd=tmp_path)

        with pytest.raises(EmptyRepositoryError):
            await syncer.sync(_descriptor(empty, branch=branch), destination)

        assert not destination.exists()

    async def test_reports_start_step(
        self, syncer: SourceSyncer, build_logger: RecordingBuildLogger, upstream_repo: Path, destination
    ):
        await syncer.sync(_descriptor(upstream_repo), destination)
        assert build_logger.by_step("clone_code")


class TestUpdate:
    """Tests for syncing an existing checkout."""

    async def test_second_sync_is_up_to_date(self, syncer: SourceSyncer, upstream_repo: Path, destination):
        descriptor = _descriptor(upstream_repo)
        first = await syncer.sync(descriptor, destination)
        readme_stat = (destination / "README.md").stat()

        second = await syncer.sync(descriptor, destination)

        assert second.up_to_date
        assert second.head == first.head
        assert (destination / "README.md").stat().st_mtime_ns == readme_stat.st_mtime_ns
        assert (destination / "README.md").stat().st_ino == readme_stat.st_ino

    async def test_new_upstream_commit_is_applied(
        self, syncer: SourceSyncer, upstream_repo: Path, tmp_path: Path, destination
    ):
        descriptor = _descriptor(upstream_repo)
        await syncer.sync(descriptor, destination)

        work = tmp_path / "upstream-work"
        (work / "README.md").write_text("second commit\n")
        run_git("commit", "-am", "Second commit", cwd=work)
        run_git("push", "upstream", "main", cwd=work)

        handle = await syncer.sync(descriptor, destination)

        assert not handle.up_to_date
        assert handle.head == run_git("rev-parse", "HEAD", cwd=work)
        assert (destination / "README.md").read_text() == "second commit\n"
        commit = await syncer.last_commit(destination)
        assert commit.hash == handle.head
        assert commit.summary == "Second commit"

    async def test_branch_switch_resyncs(self, syncer: SourceSyncer, upstream_repo: Path, destination):
        await syncer.sync(_descriptor(upstream_repo), destination)

        handle = await syncer.sync(_descriptor(upstream_repo, branch="develop"), destination)

        assert handle.branch == "develop"
        assert (destination / "DEVELOP.md").exists()
        assert pygit2.Repository(str(destination)).head.shorthand == "develop"

    async def test_changed_repository_url_resyncs(
        self, syncer: SourceSyncer, upstream_repo: Path, tmp_path: Path, destination
    ):
        await syncer.sync(_descriptor(upstream_repo), destination)

        work = tmp_path / "other-work"
        work.mkdir()
        run_git("init", cwd=work)
        run_git("symbolic-ref", "HEAD", "refs/heads/main", cwd=work)
        run_git("config", "user.name", "Sourcesync Test Bot", cwd=work)
        run_git("config", "user.email", "test@sourcesync.example.com", cwd=work)
        run_git("config", "commit.gpgsign", "false", cwd=work)
        (work / "README.md").write_text("other repository\n")
        run_git("add", "README.md", cwd=work)
        run_git("commit", "-m", "Other initial commit", cwd=work)
        other = tmp_path / "other.git"
        run_git("clone", "--bare", str(work), str(other), cwd=tmp_path)

        handle = await syncer.sync(_descriptor(other), destination)

        assert not handle.up_to_date
        assert handle.head == run_git("rev-parse", "HEAD", cwd=other)
        assert (destination / "README.md").read_text() == "other repository\n"
        assert pygit2.Repository(str(destination)).remotes["origin"].url == other.as_uri()


async def test_last_commit_of_fresh_clone(syncer: SourceSyncer, upstream_repo: Path, destination):
    handle = await syncer.sync(_descriptor(upstream_repo), destination)

    commit = await syncer.last_commit(destination)

    assert commit.hash == handle.head
    assert commit.summary == "Initial commit"
    assert commit.author_email == "test@sourcesync.example.com"


# 🔼⚙️🔚
