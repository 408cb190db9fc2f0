#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Build-event reporting for sourcesync.

The engine never owns event storage; it writes through the BuildLogger
protocol and tolerates having no logger at all."""

from sourcesync.events.logger import (
    STATUS_FAILURE,
    STEP_CALLBACK,
    STEP_CLONE,
    STEP_PROGRESS,
    BuildLogger,
    FoundationBuildLogger,
    failure_tags,
)

__all__ = [
    "STATUS_FAILURE",
    "STEP_CALLBACK",
    "STEP_CLONE",
    "STEP_PROGRESS",
    "BuildLogger",
    "FoundationBuildLogger",
    "failure_tags",
]

# 🔼⚙️🔚
