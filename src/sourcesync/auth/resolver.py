#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Choice of credentials and proxy for a single sync attempt."""

from __future__ import annotations

from provide.foundation.logger import get_logger

from sourcesync.auth.credentials import Anonymous, BasicAuth, SSHIdentity, TransferSettings
from sourcesync.config import SyncConfig
from sourcesync.errors import AuthenticationRequiredError
from sourcesync.keys import KeyProvisioner
from sourcesync.sources.descriptor import SourceDescriptor
from sourcesync.sources.endpoint import TransportEndpoint

log = get_logger(__name__)

DEFAULT_SSH_USER = "git"


class AuthResolver:
    """Builds :class:`TransferSettings` from an endpoint, a descriptor and a key identity."""

    def __init__(self, config: SyncConfig, provisioner: KeyProvisioner | None = None) -> None:
        self._config = config
        self._provisioner = provisioner or KeyProvisioner(config)
        self._warned_host_keys = False

    @property
    def provisioner(self) -> KeyProvisioner:
        return self._provisioner

    def resolve(
        self,
        endpoint: TransportEndpoint,
        descriptor: SourceDescriptor,
        key_identity: str,
    ) -> TransferSettings:
        if endpoint.is_ssh:
            return TransferSettings(
                credential=self._ssh_identity(endpoint, key_identity),
                proxy_url=None,
                verify_host_keys=self._host_key_policy(),
                key_identity=key_identity,
            )

        if endpoint.is_http and descriptor.has_basic_auth:
            credential = BasicAuth(descriptor.user, descriptor.password)
        else:
            credential = Anonymous()
        return TransferSettings(credential=credential, proxy_url=self.proxy_for(endpoint))

    def proxy_for(self, endpoint: TransportEndpoint) -> str | None:
        """Proxy for this endpoint, or ``None`` when it must go direct."""
        if not self._config.proxy_url or not endpoint.is_http:
            return None
        if any(endpoint.host_matches(domain) for domain in self._config.proxy_domains):
            log.debug("Routing fetch through proxy", host=endpoint.host)
            return self._config.proxy_url
        return None

    def _ssh_identity(self, endpoint: TransportEndpoint, key_identity: str) -> SSHIdentity:
        key_path = self._provisioner.get_private_key_path(key_identity)
        if not key_path.exists():
            log.error("No SSH private key available", identity=key_identity, key_path=str(key_path))
            raise AuthenticationRequiredError(
                f"No SSH private key is available for '{key_identity}' (looked up {key_path})."
            )
        return SSHIdentity(key_path=key_path, username=endpoint.user or DEFAULT_SSH_USER)

    def _host_key_policy(self) -> bool:
        if not self._config.verify_host_keys and not self._warned_host_keys:
            log.warning(
                "SSH host key verification is disabled",
                hint="set SOURCESYNC_VERIFY_HOST_KEYS=true to enable it",
            )
            self._warned_host_keys = True
        return self._config.verify_host_keys


# 🔼⚙️🔚
