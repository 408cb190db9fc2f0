#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""pygit2 remote callbacks wired to one sync attempt."""

from __future__ import annotations

import pygit2
from pygit2.enums import CredentialType
from provide.foundation.logger import get_logger

from sourcesync.auth.credentials import BasicAuth, SSHIdentity, TransferSettings
from sourcesync.errors import AuthenticationRequiredError, AuthorizationFailedError
from sourcesync.progress.deadline import Deadline
from sourcesync.progress.relay import ProgressRelay

log = get_logger(__name__)


class SyncCallbacks(pygit2.RemoteCallbacks):
    """Supplies credentials, relays sideband text and enforces the deadline.

    Use a fresh instance per network connection: libgit2 asks for credentials
    a second time on the same connection only after refusing the first ones,
    which is how a rejected key is detected.

    Exceptions raised here abort the libgit2 operation and are re-raised by
    pygit2 from the calling ``fetch``/``list_heads``.
    """

    def __init__(
        self,
        settings: TransferSettings,
        relay: ProgressRelay,
        deadline: Deadline,
        protocol: str,
    ) -> None:
        super().__init__()
        self._settings = settings
        self._relay = relay
        self._deadline = deadline
        self._protocol = protocol
        self.credential_requests = 0

    def credentials(self, url, username_from_url, allowed_types):
        self._deadline.check()
        credential = self._settings.credential

        if isinstance(credential, SSHIdentity):
            if allowed_types & CredentialType.USERNAME and not allowed_types & CredentialType.SSH_KEY:
                return pygit2.Username(username_from_url or credential.username)
            self.credential_requests += 1
            if self.credential_requests > 1:
                log.debug("Remote refused SSH key", url=url, key_identity=self._settings.key_identity)
                raise AuthorizationFailedError(
                    f"The SSH key {credential.key_path} was rejected by the remote.",
                    ssh_key_rejected=True,
                )
            public_key = credential.public_key_path
            return pygit2.Keypair(
                username_from_url or credential.username,
                str(public_key) if public_key else None,
                str(credential.key_path),
                "",
            )

        self.credential_requests += 1
        if isinstance(credential, BasicAuth):
            if self.credential_requests > 1:
                raise AuthorizationFailedError()
            return pygit2.UserPass(credential.user, credential.password)

        raise AuthenticationRequiredError()

    def certificate_check(self, certificate, valid, host):
        self._deadline.check()
        if self._protocol == "ssh" and not self._settings.verify_host_keys:
            return True
        raise pygit2.Passthrough

    def sideband_progress(self, string):
        self._deadline.check()
        self._relay.feed(string)

    def transfer_progress(self, stats):
        self._deadline.check()


# 🔼⚙️🔚
