#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Classified outcomes of a source synchronization.

Every failure that leaves the sync engine is one of the classes below. Callers
match on the class or on ``error.kind``; the message text is meant for
operators and may change freely.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """Closed set of sync failure kinds."""

    AUTHENTICATION_REQUIRED = "authentication_required"
    AUTHORIZATION_FAILED = "authorization_failed"
    REPOSITORY_NOT_FOUND = "repository_not_found"
    EMPTY_REPOSITORY = "empty_repository"
    BRANCH_NOT_FOUND = "branch_not_found"
    AUTHENTICATION_RETRY_EXHAUSTED = "authentication_retry_exhausted"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


class SyncError(Exception):
    """Base exception for classified sync failures."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AuthenticationRequiredError(SyncError):
    """The remote demands credentials and none were available."""

    kind = ErrorKind.AUTHENTICATION_REQUIRED

    def __init__(self, message: str = "The code source requires authorized access.") -> None:
        super().__init__(message)


class AuthorizationFailedError(SyncError):
    """The remote rejected the credentials that were offered."""

    kind = ErrorKind.AUTHORIZATION_FAILED

    def __init__(
        self,
        message: str = "Authentication against the code source failed.",
        *,
        ssh_key_rejected: bool = False,
    ) -> None:
        self.ssh_key_rejected = ssh_key_rejected
        super().__init__(message)


class RepositoryNotFoundError(SyncError):
    kind = ErrorKind.REPOSITORY_NOT_FOUND

    def __init__(self, message: str = "The repository does not exist.") -> None:
        super().__init__(message)


class EmptyRepositoryError(SyncError):
    kind = ErrorKind.EMPTY_REPOSITORY

    def __init__(self, message: str = "The remote repository is empty.") -> None:
        super().__init__(message)


class BranchNotFoundError(SyncError):
    kind = ErrorKind.BRANCH_NOT_FOUND

    def __init__(self, branch: str) -> None:
        self.branch = branch
        super().__init__(f"Branch '{branch}' does not exist in the code source.")


class AuthenticationRetryExhaustedError(SyncError):
    """Both the tenant key and the fallback key were rejected."""

    kind = ErrorKind.AUTHENTICATION_RETRY_EXHAUSTED

    def __init__(
        self,
        message: str = "The remote repository requires an SSH key to be configured as a deploy key.",
    ) -> None:
        super().__init__(message)


class SyncTimeoutError(SyncError):
    kind = ErrorKind.TIMEOUT

    def __init__(self, timeout_minutes: int | None = None) -> None:
        self.timeout_minutes = timeout_minutes
        if timeout_minutes is None:
            message = "Fetching the code source timed out."
        else:
            message = f"Fetching the code source timed out after {timeout_minutes} minute(s)."
        super().__init__(message)


class UnknownSyncError(SyncError):
    """Wraps an unclassified failure, keeping the original error."""

    kind = ErrorKind.UNKNOWN

    def __init__(self, wrapped: BaseException) -> None:
        self.wrapped = wrapped
        super().__init__(f"Fetching the code source failed: {wrapped}")


class InvalidEndpointError(ValueError):
    """A repository URL that cannot be parsed as a transport endpoint."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Invalid repository URL '{url}': {reason}")


class KeyProvisioningError(Exception):
    """Creating or reading SSH key material failed."""

    def __init__(self, message: str, identity: str) -> None:
        self.identity = identity
        super().__init__(message)


class UnsafeRemovalError(OSError):
    """Refused to remove a directory that must never be deleted."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Refusing to remove directory '{path}'")


# 🔼⚙️🔚
