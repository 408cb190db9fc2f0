#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Credential variants and the request-scoped transfer settings."""

from __future__ import annotations

from pathlib import Path

from attrs import define, field


@define(frozen=True)
class SSHIdentity:
    key_path: Path
    username: str = "git"

    @property
    def public_key_path(self) -> Path | None:
        candidate = self.key_path.with_name(self.key_path.name + ".pub")
        return candidate if candidate.exists() else None


@define(frozen=True)
class BasicAuth:
    user: str
    password: str = field(repr=False)


@define(frozen=True)
class Anonymous:
    pass


AuthCredential = SSHIdentity | BasicAuth | Anonymous


@define(frozen=True)
class TransferSettings:
    """Everything one git network call needs to authenticate and route.

    A fresh value is built for every attempt and passed explicitly into the
    transport, so concurrent syncs never observe each other's proxy or keys.
    """

    credential: AuthCredential = field(factory=Anonymous)
    proxy_url: str | None = None
    verify_host_keys: bool = False
    key_identity: str | None = None


# 🔼⚙️🔚
