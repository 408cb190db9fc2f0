#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Source descriptors, endpoints and working-tree locations."""

from sourcesync.sources.descriptor import SourceDescriptor, code_source_dir
from sourcesync.sources.endpoint import TransportEndpoint, parse_endpoint
from sourcesync.sources.filesystem import has_repository_metadata, remove_dir

__all__ = [
    "SourceDescriptor",
    "TransportEndpoint",
    "code_source_dir",
    "has_repository_metadata",
    "parse_endpoint",
    "remove_dir",
]

# 🔼⚙️🔚
