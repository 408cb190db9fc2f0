#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Per-tenant SSH key material."""

from sourcesync.keys.provisioner import KeyPair, KeyProvisioner, make_key_pair

__all__ = ["KeyPair", "KeyProvisioner", "make_key_pair"]

# 🔼⚙️🔚
