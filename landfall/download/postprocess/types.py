from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from landfall.core.models import MessageKind

_LEVELS = {
    MessageKind.INFO: logging.INFO,
    MessageKind.WARNING: logging.WARNING,
    MessageKind.ERROR: logging.ERROR,
    MessageKind.DETAIL: logging.DEBUG,
}


@dataclass(frozen=True)
class CleanupResult:
    ok: bool = True
    deleted: bool = False

    def merge(self, other: CleanupResult) -> CleanupResult:
        return CleanupResult(ok=self.ok and other.ok, deleted=self.deleted or other.deleted)


@dataclass
class JobReporter:
    """Sends job messages to the log and to the job's own message list."""

    job_id: str
    logger: logging.Logger
    message_callback: Optional[Callable[[MessageKind, str], None]] = None

    def _emit(self, kind: MessageKind, text: str) -> None:
        self.logger.log(_LEVELS[kind], "[%s] %s", self.job_id, text)
        if self.message_callback is not None:
            self.message_callback(kind, text)

    def info(self, text: str) -> None:
        self._emit(MessageKind.INFO, text)

    def warning(self, text: str) -> None:
        self._emit(MessageKind.WARNING, text)

    def error(self, text: str) -> None:
        self._emit(MessageKind.ERROR, text)

    def detail(self, text: str) -> None:
        self._emit(MessageKind.DETAIL, text)
