#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Source descriptors and the per-tenant directories derived from them."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from attrs import define, field
from provide.foundation.logger import get_logger

from sourcesync.config import SyncConfig
from sourcesync.sources.endpoint import TransportEndpoint, parse_endpoint

log = get_logger(__name__)


def _validate_scope(instance: SourceDescriptor, attribute: Any, value: str) -> None:
    if not value:
        raise ValueError(f"{attribute.name} must not be empty")
    if "/" in value or "\\" in value or value in (".", ".."):
        raise ValueError(f"{attribute.name} must be a single path component, got '{value}'")


@define(frozen=True)
class SourceDescriptor:
    """Identifies the repository, branch, credentials and tenant scope of a build.

    ``tenant_id`` and ``service_id`` namespace every local directory so that
    builds for different services never share a working tree.
    """

    repository_url: str
    tenant_id: str = field(validator=_validate_scope)
    service_id: str = field(validator=_validate_scope)
    branch: str = ""
    user: str = ""
    password: str = field(default="", repr=False)
    server_type: str = "git"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SourceDescriptor:
        """Build a descriptor from the pipeline's JSON field names."""
        return cls(
            repository_url=data["repository_url"],
            tenant_id=data["tenant_id"],
            service_id=data["service_id"],
            branch=data.get("branch") or "",
            user=data.get("user") or "",
            password=data.get("password") or "",
            server_type=data.get("server_type") or "git",
        )

    @property
    def has_basic_auth(self) -> bool:
        return bool(self.user and self.password)

    def endpoint(self) -> TransportEndpoint:
        return parse_endpoint(self.repository_url)

    def code_cache_dir(self, config: SyncConfig) -> Path:
        """Build cache directory: ``<cache_dir>/build/<tenant>/<service>``."""
        path = config.cache_dir / "build" / self.tenant_id / self.service_id
        log.debug("Resolved code cache directory", path=str(path))
        return path

    def code_source_dir(self, config: SyncConfig) -> Path:
        """Checkout directory: ``<source_dir>/build/<tenant>/<service>``."""
        return code_source_dir(config, self.tenant_id, self.service_id)


def code_source_dir(config: SyncConfig, tenant_id: str, service_id: str) -> Path:
    return config.source_dir / "build" / tenant_id / service_id


# 🔼⚙️🔚
