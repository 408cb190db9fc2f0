#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""Relay of transport sideband progress to the build logger.

The transport thread feeds raw text chunks. Chunks are cut into logical lines
(CR or LF terminated, the way terminal progress bars redraw) and handed over a
bounded queue to a consumer thread, which cleans each line and emits one
progress record per non-empty line, in arrival order.
"""

from __future__ import annotations

import json
import queue
import re
import sys
import threading
from typing import TextIO

from provide.foundation.logger import get_logger

from sourcesync.events.logger import STEP_PROGRESS, BuildLogger
from sourcesync.progress.deadline import Deadline

log = get_logger(__name__)

DEFAULT_QUEUE_SIZE = 1024
POLL_INTERVAL_SECONDS = 0.1
JOIN_TIMEOUT_SECONDS = 2.0
PROGRESS_ID = "fetch_source"

_LINE_BREAK = re.compile(r"[\r\n]")
_CLOSE = object()


def normalize_progress_line(line: str) -> str:
    """Strip carriage returns, newlines and NUL bytes."""
    return line.replace("\r", "").replace("\n", "").replace("\x00", "")


class ProgressRelay:
    """Bounded producer/consumer bridge from transport output to a BuildLogger.

    Without a logger, chunks are written unparsed to ``stream`` (stdout by
    default) and no thread is started.
    """

    def __init__(
        self,
        logger: BuildLogger | None,
        deadline: Deadline,
        *,
        maxsize: int = DEFAULT_QUEUE_SIZE,
        stream: TextIO | None = None,
        progress_id: str = PROGRESS_ID,
    ) -> None:
        self._logger = logger
        self._deadline = deadline
        self._stream = stream
        self._progress_id = progress_id
        self._queue: queue.Queue[object] = queue.Queue(maxsize=maxsize)
        self._pending = ""
        self._closed = False
        # Guards _pending and _closed between the transport thread and close().
        self._lock = threading.Lock()
        self._dropped = 0
        self._emitted = 0
        self._thread: threading.Thread | None = None

    @property
    def emitted(self) -> int:
        return self._emitted

    @property
    def dropped(self) -> int:
        return self._dropped

    def start(self) -> ProgressRelay:
        if self._logger is not None and self._thread is None:
            self._thread = threading.Thread(target=self._consume, name="sourcesync-progress", daemon=True)
            self._thread.start()
        return self

    def feed(self, chunk: str | bytes) -> None:
        """Accept a chunk of transport output. Called from the transport thread."""
        if not chunk:
            return
        if isinstance(chunk, bytes):
            chunk = chunk.decode("utf-8", errors="replace")

        if self._logger is None:
            if self._closed:
                return
            stream = self._stream or sys.stdout
            stream.write(chunk)
            stream.flush()
            return

        with self._lock:
            if self._closed:
                return
            parts = _LINE_BREAK.split(self._pending + chunk)
            self._pending = parts.pop()
            for line in parts:
                if line:
                    self._put(line)

    def close(self) -> None:
        """Flush the partial last line, stop the consumer and wait for it."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            if self._thread is None:
                return
            if self._pending:
                self._put(self._pending)
                self._pending = ""
            self._put(_CLOSE)
        self._thread.join(timeout=JOIN_TIMEOUT_SECONDS)
        if self._dropped:
            log.warning("Progress lines dropped after deadline", dropped=self._dropped)

    def __enter__(self) -> ProgressRelay:
        return self.start()

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _put(self, item: object) -> None:
        while True:
            try:
                self._queue.put(item, timeout=POLL_INTERVAL_SECONDS)
                return
            except queue.Full:
                consumer_gone = self._thread is None or not self._thread.is_alive()
                if self._deadline.expired or consumer_gone:
                    if item is not _CLOSE:
                        self._dropped += 1
                    return

    def _consume(self) -> None:
        while True:
            try:
                item = self._queue.get(timeout=POLL_INTERVAL_SECONDS)
            except queue.Empty:
                if self._deadline.expired:
                    return
                continue
            if item is _CLOSE or self._deadline.expired:
                return
            self._emit(item)

    def _emit(self, raw: object) -> None:
        line = normalize_progress_line(str(raw))
        if not line:
            return
        message = json.dumps({"progress": line, "id": self._progress_id}, ensure_ascii=False)
        try:
            self._logger.debug(message, {"step": STEP_PROGRESS})
        except Exception as e:
            log.error("Build logger failed to record progress", error=str(e))
            return
        self._emitted += 1


# 🔼⚙️🔚
