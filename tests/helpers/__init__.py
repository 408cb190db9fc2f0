#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Test doubles shared by the sourcesync test suite."""

from __future__ import annotations

# 🔼⚙️🔚
