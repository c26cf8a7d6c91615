"""User-visible notices (toasts) raised by inbox operations.

The chat UI drains the board after every turn and shows each notice once.
"""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Literal

logger = logging.getLogger(__name__)

NoticeLevel = Literal["success", "error", "info"]


@dataclass(frozen=True)
class Notice:
    level: NoticeLevel
    text: str
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))


class NoticeBoard:
    """FIFO of pending notices for one conversation."""

    def __init__(self) -> None:
        self._notices: list[Notice] = []

    def push(self, level: NoticeLevel, text: str) -> Notice:
        notice = Notice(level=level, text=text)
        self._notices.append(notice)
        logger.debug("Notice [%s]: %s", level, text)
        return notice

    def success(self, text: str) -> Notice:
        return self.push("success", text)

    def error(self, text: str) -> Notice:
        return self.push("error", text)

    def pending(self) -> list[Notice]:
        return list(self._notices)

    def drain(self) -> list[Notice]:
        """Return and forget all pending notices."""
        notices, self._notices = self._notices, []
        return notices
