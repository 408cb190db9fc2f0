#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Sourcesync Engines Package.

This package contains implementations of the various engine protocols
(e.g., SourceTransport) used by sourcesync."""

# 🔼⚙️🔚
