#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Maps transport and library failures onto the closed set of sync errors."""

from __future__ import annotations

import re

import pygit2

from sourcesync.errors import (
    AuthenticationRequiredError,
    AuthorizationFailedError,
    BranchNotFoundError,
    EmptyRepositoryError,
    RepositoryNotFoundError,
    SyncError,
    SyncTimeoutError,
    UnknownSyncError,
)

# Checked in order; first match wins.
AUTHENTICATION_REQUIRED_PATTERNS = (
    re.compile(r"authentication required"),
    re.compile(r"no callback set"),
)
SSH_KEY_REJECTED_PATTERNS = (
    re.compile(r"failed to authenticate ssh session"),
    re.compile(r"unable to authenticate"),
    re.compile(r"permission denied \(publickey"),
    re.compile(r"unable to extract public key from private key"),
)
AUTHORIZATION_FAILED_PATTERNS = (
    re.compile(r"status code:? 40[13]\b"),
    re.compile(r"too many redirects or authentication replays"),
    re.compile(r"authentication failed"),
    re.compile(r"access denied"),
)
REPOSITORY_NOT_FOUND_PATTERNS = (
    re.compile(r"status code:? 404\b"),
    re.compile(r"repository not found"),
    re.compile(r"does not appear to be a git repository"),
    re.compile(r"could not find repository"),
    re.compile(r"failed to resolve path"),
)
EMPTY_REPOSITORY_PATTERNS = (re.compile(r"remote repository is empty"),)
BRANCH_NOT_FOUND_PATTERNS = (
    re.compile(r"reference '?refs/(heads|remotes)/.+'? not found"),
    re.compile(r"couldn't find remote ref"),
)
TIMEOUT_PATTERNS = (
    re.compile(r"timed out"),
    re.compile(r"deadline exceeded"),
)


def _matches(patterns: tuple[re.Pattern[str], ...], text: str) -> bool:
    return any(p.search(text) for p in patterns)


def classify(
    error: BaseException,
    *,
    branch: str | None = None,
    timeout_minutes: int | None = None,
) -> SyncError:
    """Return the :class:`SyncError` that describes ``error``.

    Already-classified errors pass through unchanged. Anything unrecognized
    becomes :class:`UnknownSyncError` wrapping the original.
    """
    if isinstance(error, SyncError):
        return error

    if isinstance(error, TimeoutError):
        return SyncTimeoutError(timeout_minutes)

    if isinstance(error, (pygit2.GitError, OSError, KeyError)):
        classified = _classify_message(str(error).lower(), branch, timeout_minutes)
        if classified is not None:
            return classified

    # pygit2 reports libgit2's "not found" as KeyError
    if isinstance(error, KeyError) and branch:
        return BranchNotFoundError(branch)

    return UnknownSyncError(error)


def _classify_message(text: str, branch: str | None, timeout_minutes: int | None) -> SyncError | None:
    if _matches(AUTHENTICATION_REQUIRED_PATTERNS, text):
        return AuthenticationRequiredError()
    if _matches(SSH_KEY_REJECTED_PATTERNS, text):
        return AuthorizationFailedError("The remote rejected the SSH key.", ssh_key_rejected=True)
    if _matches(AUTHORIZATION_FAILED_PATTERNS, text):
        return AuthorizationFailedError()
    if _matches(REPOSITORY_NOT_FOUND_PATTERNS, text):
        return RepositoryNotFoundError()
    if _matches(EMPTY_REPOSITORY_PATTERNS, text):
        return EmptyRepositoryError()
    if branch and _matches(BRANCH_NOT_FOUND_PATTERNS, text):
        return BranchNotFoundError(branch)
    if _matches(TIMEOUT_PATTERNS, text):
        return SyncTimeoutError(timeout_minutes)
    return None


def is_ssh_key_rejection(error: BaseException) -> bool:
    """The one failure signature that earns a retry with the fallback key."""
    return isinstance(error, AuthorizationFailedError) and error.ssh_key_rejected


# 🔼⚙️🔚
