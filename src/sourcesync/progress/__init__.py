#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Transport progress relaying under a cancellable deadline."""

from sourcesync.progress.deadline import Deadline, clamp_timeout
from sourcesync.progress.relay import ProgressRelay, normalize_progress_line

__all__ = ["Deadline", "ProgressRelay", "clamp_timeout", "normalize_progress_line"]

# 🔼⚙️🔚
