#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""The sync orchestrator and its failure handling."""

from sourcesync.sync.classifier import classify, is_ssh_key_rejection
from sourcesync.sync.orchestrator import SourceSyncer, sync_source
from sourcesync.sync.retry import AuthAttempt, AuthFallback

__all__ = [
    "AuthAttempt",
    "AuthFallback",
    "SourceSyncer",
    "classify",
    "is_ssh_key_rejection",
    "sync_source",
]

# 🔼⚙️🔚
