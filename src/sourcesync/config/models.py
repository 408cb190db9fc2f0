#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Configuration model for the sync engine, sourced from the environment."""

from __future__ import annotations

from collections.abc import Mapping
import os
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

from attrs import define, field
from provide.foundation.logger import get_logger

log = get_logger(__name__)

DEFAULT_CACHE_DIR = Path("/cache")
DEFAULT_SOURCE_DIR = Path("/grdata/source")
DEFAULT_HOME_DIR = Path("/root")
DEFAULT_PROXY_DOMAINS = ("github.com",)
FALLBACK_IDENTITY = "builder_rsa"
DEFAULT_IDENTITY = "id_rsa"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class ConfigurationError(Exception):
    """Raised for invalid sync configuration values."""


def _to_path(value: Any) -> Path:
    return value if isinstance(value, Path) else Path(value)


def _to_domains(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        value = value.split(",")
    return tuple(d.strip().lower() for d in value if d and d.strip())


def _parse_bool(name: str, raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Environment variable {name} must be a boolean, got '{raw}'")


def _validate_proxy(instance: SyncConfig, attribute: Any, value: str | None) -> None:
    if value is None:
        return
    parts = urlsplit(value)
    if not parts.scheme or not parts.netloc:
        raise ConfigurationError(f"Proxy URL must include a scheme and host, got '{value}'")


def _validate_identity(instance: SyncConfig, attribute: Any, value: str) -> None:
    if not value or "/" in value or value in (".", ".."):
        raise ConfigurationError(f"{attribute.name} must be a plain file name, got '{value}'")


@define(frozen=True)
class SyncConfig:
    """Locations and transport policy for source synchronization.

    Attributes:
        cache_dir: Root of the per-tenant build cache.
        source_dir: Root of the per-tenant source checkouts.
        home_dir: Home directory whose ``.ssh`` folder stores key pairs.
        proxy_url: Proxy for outbound calls to ``proxy_domains`` hosts only.
        proxy_domains: Hosting domains whose traffic may be proxied.
        verify_host_keys: Check SSH host keys. Off by default, which trades
            host authenticity for unattended builds.
        fallback_identity: Shared key used when a tenant key is rejected.
        default_identity: Last-resort key when no shared key exists.
    """

    cache_dir: Path = field(default=DEFAULT_CACHE_DIR, converter=_to_path)
    source_dir: Path = field(default=DEFAULT_SOURCE_DIR, converter=_to_path)
    home_dir: Path = field(default=DEFAULT_HOME_DIR, converter=_to_path)
    proxy_url: str | None = field(default=None, validator=_validate_proxy)
    proxy_domains: tuple[str, ...] = field(default=DEFAULT_PROXY_DOMAINS, converter=_to_domains)
    verify_host_keys: bool = field(default=False)
    fallback_identity: str = field(default=FALLBACK_IDENTITY, validator=_validate_identity)
    default_identity: str = field(default=DEFAULT_IDENTITY, validator=_validate_identity)

    @property
    def ssh_dir(self) -> Path:
        return self.home_dir / ".ssh"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> SyncConfig:
        """Build a configuration from environment variables.

        Empty variables count as unset. An unparseable ``GITHUB_PROXY`` is
        logged and dropped so that builds without a proxy keep working.
        """
        env = os.environ if environ is None else environ

        kwargs: dict[str, Any] = {}
        if env.get("CACHE_DIR"):
            kwargs["cache_dir"] = env["CACHE_DIR"]
        if env.get("SOURCE_DIR"):
            kwargs["source_dir"] = env["SOURCE_DIR"]
        if env.get("HOME"):
            kwargs["home_dir"] = env["HOME"]
        if env.get("SOURCESYNC_PROXY_DOMAINS"):
            kwargs["proxy_domains"] = env["SOURCESYNC_PROXY_DOMAINS"]
        if "SOURCESYNC_VERIFY_HOST_KEYS" in env:
            kwargs["verify_host_keys"] = _parse_bool(
                "SOURCESYNC_VERIFY_HOST_KEYS", env["SOURCESYNC_VERIFY_HOST_KEYS"]
            )

        proxy = env.get("GITHUB_PROXY")
        if proxy:
            try:
                _validate_proxy(cls, None, proxy)
            except ConfigurationError as e:
                log.error("Ignoring invalid proxy configuration", proxy=proxy, error=str(e))
            else:
                kwargs["proxy_url"] = proxy

        return cls(**kwargs)


# 🔼⚙️🔚
