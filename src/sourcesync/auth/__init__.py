#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Credential resolution for git transports."""

from sourcesync.auth.credentials import (
    Anonymous,
    AuthCredential,
    BasicAuth,
    SSHIdentity,
    TransferSettings,
)
from sourcesync.auth.resolver import AuthResolver

__all__ = [
    "Anonymous",
    "AuthCredential",
    "AuthResolver",
    "BasicAuth",
    "SSHIdentity",
    "TransferSettings",
]

# 🔼⚙️🔚
