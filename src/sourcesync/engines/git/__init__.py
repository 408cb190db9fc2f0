#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Git Engine implementation for sourcesync."""

from .base import GitEngine, WorkingTreeMismatchError
from .callbacks import SyncCallbacks

__all__ = ["GitEngine", "SyncCallbacks", "WorkingTreeMismatchError"]

# 🔼⚙️🔚
