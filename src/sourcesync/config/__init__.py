#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Configuration module for sourcesync.

Re-exports the configuration model and its environment loader."""

from __future__ import annotations

from sourcesync.config.models import (
    DEFAULT_CACHE_DIR,
    DEFAULT_HOME_DIR,
    DEFAULT_SOURCE_DIR,
    ConfigurationError,
    SyncConfig,
)

__all__ = [
    "DEFAULT_CACHE_DIR",
    "DEFAULT_HOME_DIR",
    "DEFAULT_SOURCE_DIR",
    "ConfigurationError",
    "SyncConfig",
]

# 🔼⚙️🔚
