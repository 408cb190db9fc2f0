#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""The one-shot SSH key fallback as an explicit state machine."""

from __future__ import annotations

from enum import Enum, auto

from attrs import define, field
from provide.foundation.logger import get_logger

from sourcesync.sync.classifier import is_ssh_key_rejection

log = get_logger(__name__)


class AuthAttempt(Enum):
    PRIMARY = auto()
    FALLBACK = auto()
    EXHAUSTED = auto()


@define
class AuthFallback:
    """Tracks which key identity to offer next.

    PRIMARY offers the tenant key. A rejected SSH key moves PRIMARY to
    FALLBACK (shared key) and FALLBACK to EXHAUSTED. Nothing else changes
    state, so at most one retry ever happens.
    """

    primary_identity: str
    fallback_identity: str
    state: AuthAttempt = field(default=AuthAttempt.PRIMARY)

    @property
    def identity(self) -> str:
        if self.state is AuthAttempt.PRIMARY:
            return self.primary_identity
        return self.fallback_identity

    @property
    def exhausted(self) -> bool:
        return self.state is AuthAttempt.EXHAUSTED

    def advance(self, error: BaseException) -> bool:
        """Record a failed attempt. True means retry with :attr:`identity`."""
        if not is_ssh_key_rejection(error):
            return False
        if self.state is AuthAttempt.PRIMARY:
            self.state = AuthAttempt.FALLBACK
            log.info(
                "SSH key rejected, retrying with fallback identity",
                rejected=self.primary_identity,
                fallback=self.fallback_identity,
            )
            return True
        self.state = AuthAttempt.EXHAUSTED
        return False


# 🔼⚙️🔚
