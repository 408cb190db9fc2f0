#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Creation and lookup of per-tenant SSH key pairs.

Each tenant gets one RSA key pair under ``<home>/.ssh/``: the private key at
``<tenant_id>`` and the public key at ``<tenant_id>.pub``. Operators register
the public key as a deploy key on the upstream host. Key pairs are created on
first request and reused forever after.
"""

from __future__ import annotations

import os
from pathlib import Path
import tempfile
import threading

from attrs import define, field
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from provide.foundation.logger import get_logger

from sourcesync.config import SyncConfig
from sourcesync.errors import KeyProvisioningError

log = get_logger(__name__)

DEFAULT_KEY_BITS = 2048
PUBLIC_KEY_SUFFIX = ".pub"


@define(frozen=True)
class KeyPair:
    """An RSA key pair in the encodings SSH tooling expects."""

    private_key_pem: str = field(repr=False)
    public_key_authorized: str


def make_key_pair(bits: int = DEFAULT_KEY_BITS) -> KeyPair:
    """Generate an RSA key pair.

    The private key is PKCS#1 PEM (``BEGIN RSA PRIVATE KEY``) and the public
    key is a single authorized-keys line terminated by a newline.
    """
    private_key = rsa.generate_private_key(
        public_exponent=65537,
        key_size=bits,
        backend=default_backend(),
    )
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_line = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.OpenSSH,
        format=serialization.PublicFormat.OpenSSH,
    )
    return KeyPair(
        private_key_pem=private_pem.decode("ascii"),
        public_key_authorized=public_line.decode("ascii") + "\n",
    )


class KeyProvisioner:
    """Owns the SSH key files of every tenant.

    Consumers only read key paths; creating and persisting key material goes
    through this class.
    """

    def __init__(self, config: SyncConfig, key_bits: int = DEFAULT_KEY_BITS) -> None:
        self._config = config
        self._key_bits = key_bits
        self._lock = threading.Lock()
        self._log = log.bind(ssh_dir=str(config.ssh_dir))

    @property
    def ssh_dir(self) -> Path:
        return self._config.ssh_dir

    def private_key_file(self, identity: str) -> Path:
        return self.ssh_dir / _checked_identity(identity)

    def public_key_file(self, identity: str) -> Path:
        return self.ssh_dir / (_checked_identity(identity) + PUBLIC_KEY_SUFFIX)

    def get_private_key_path(self, identity: str) -> Path:
        """Resolve the private key to authenticate with for ``identity``.

        Lookup order: the identity's own key, then the shared fallback key,
        then the default identity. The last path is returned even when it does
        not exist; the caller reports the missing key.
        """
        own = self.private_key_file(identity)
        if own.exists():
            return own
        shared = self.ssh_dir / self._config.fallback_identity
        if shared.exists():
            return shared
        return self.ssh_dir / self._config.default_identity

    def get_or_create_public_key(self, tenant_id: str) -> str:
        """Return the tenant's public key, generating the pair on first use."""
        public_path = self.public_key_file(tenant_id)
        existing = self._read_public_key(public_path, tenant_id)
        if existing is not None:
            return existing

        with self._lock:
            # Another thread may have finished generation while we waited.
            existing = self._read_public_key(public_path, tenant_id)
            if existing is not None:
                return existing

            self._log.info("Generating SSH key pair", tenant_id=tenant_id, bits=self._key_bits)
            try:
                key_pair = make_key_pair(self._key_bits)
            except ValueError as e:
                raise KeyProvisioningError(f"Failed to generate SSH key pair: {e}", tenant_id) from e

            self._persist(tenant_id, key_pair)
            return key_pair.public_key_authorized

    def _read_public_key(self, path: Path, identity: str) -> str | None:
        try:
            return path.read_text(encoding="ascii")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise KeyProvisioningError(f"Failed to read public key {path}: {e}", identity) from e

    def _persist(self, identity: str, key_pair: KeyPair) -> None:
        try:
            self.ssh_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
            # Public key last: its presence marks a complete pair.
            _atomic_write(self.private_key_file(identity), key_pair.private_key_pem, mode=0o600)
            _atomic_write(self.public_key_file(identity), key_pair.public_key_authorized, mode=0o644)
        except OSError as e:
            self._log.error("Failed to persist SSH key pair", tenant_id=identity, error=str(e))
            raise KeyProvisioningError(f"Failed to persist SSH key pair: {e}", identity) from e
        self._log.info(
            "SSH key pair persisted",
            tenant_id=identity,
            private_key=str(self.private_key_file(identity)),
        )


def _checked_identity(identity: str) -> str:
    if not identity or "/" in identity or "\\" in identity or identity in (".", ".."):
        raise KeyProvisioningError(f"Invalid key identity '{identity}'", identity)
    return identity


def _atomic_write(path: Path, content: str, mode: int) -> None:
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="ascii") as handle:
            handle.write(content)
            handle.flush()
            os.fchmod(handle.fileno(), mode)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


# 🔼⚙️🔚
