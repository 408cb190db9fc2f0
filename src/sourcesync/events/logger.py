#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""The build-event logger the sync engine reports steps and progress to."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from provide.foundation.logger import get_logger

STEP_CLONE = "clone_code"
STEP_PROGRESS = "progress"
STEP_CALLBACK = "callback"
STATUS_FAILURE = "failure"


@runtime_checkable
class BuildLogger(Protocol):
    """Receives step/status-tagged records for a single build."""

    def info(self, message: str, tags: Mapping[str, str]) -> None: ...

    def debug(self, message: str, tags: Mapping[str, str]) -> None: ...

    def error(self, message: str, tags: Mapping[str, str]) -> None: ...


class FoundationBuildLogger:
    """BuildLogger backed by a provide-foundation structured logger."""

    def __init__(self, name: str = "sourcesync.build", **context: str) -> None:
        self._log = get_logger(name).bind(**context) if context else get_logger(name)

    def info(self, message: str, tags: Mapping[str, str]) -> None:
        self._log.info(message, **tags)

    def debug(self, message: str, tags: Mapping[str, str]) -> None:
        self._log.debug(message, **tags)

    def error(self, message: str, tags: Mapping[str, str]) -> None:
        self._log.error(message, **tags)


def failure_tags() -> dict[str, str]:
    return {"step": STEP_CALLBACK, "status": STATUS_FAILURE}


# 🔼⚙️🔚
