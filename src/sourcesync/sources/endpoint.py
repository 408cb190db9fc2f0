#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Parsing of repository URLs into transport endpoints."""

from __future__ import annotations

import re
from urllib.parse import unquote, urlsplit

from attrs import define, field

from sourcesync.errors import InvalidEndpointError

SUPPORTED_SCHEMES = {"ssh", "http", "https", "git", "file"}
SCHEME_ALIASES = {"git+ssh": "ssh", "ssh+git": "ssh"}

# user@host:path, the scp-like form git accepts for ssh
_SCP_LIKE = re.compile(r"^(?:(?P<user>[^@/]+)@)?(?P<host>[^@/:]+):(?P<path>(?!//).+)$")


@define(frozen=True)
class TransportEndpoint:
    """Where a repository lives and how to reach it."""

    protocol: str
    host: str = ""
    path: str = ""
    user: str | None = None
    password: str | None = field(default=None, repr=False)
    port: int | None = None

    @property
    def is_ssh(self) -> bool:
        return self.protocol == "ssh"

    @property
    def is_http(self) -> bool:
        return self.protocol in ("http", "https")

    def host_matches(self, domain: str) -> bool:
        """True when the host is ``domain`` or one of its subdomains."""
        host = self.host.lower()
        domain = domain.lower()
        return host == domain or host.endswith("." + domain)


def parse_endpoint(url: str) -> TransportEndpoint:
    """Parse ``url`` the way git does: URL form, scp-like ssh form, or local path."""
    if not url or not url.strip():
        raise InvalidEndpointError(url, "URL is empty")
    url = url.strip()

    if "://" in url:
        return _parse_url(url)

    match = _SCP_LIKE.match(url)
    if match and len(match.group("host")) > 1:
        return TransportEndpoint(
            protocol="ssh",
            host=match.group("host"),
            path=match.group("path"),
            user=match.group("user"),
        )

    return TransportEndpoint(protocol="file", path=url)


def _parse_url(url: str) -> TransportEndpoint:
    parts = urlsplit(url)
    scheme = SCHEME_ALIASES.get(parts.scheme.lower(), parts.scheme.lower())
    if scheme not in SUPPORTED_SCHEMES:
        raise InvalidEndpointError(url, f"unsupported scheme '{parts.scheme}'")

    if scheme == "file":
        return TransportEndpoint(protocol="file", path=unquote(parts.path))

    if not parts.hostname:
        raise InvalidEndpointError(url, "missing host")
    try:
        port = parts.port
    except ValueError as e:
        raise InvalidEndpointError(url, str(e)) from e

    return TransportEndpoint(
        protocol=scheme,
        host=parts.hostname,
        path=parts.path,
        user=unquote(parts.username) if parts.username else None,
        password=unquote(parts.password) if parts.password else None,
        port=port,
    )


# 🔼⚙️🔚
