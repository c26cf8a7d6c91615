"""Inbox connector protocol — the boundary to the four edge functions.

The store and the dialogue executor never talk HTTP directly; they receive
an object implementing this protocol, so tests can pass a fake.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from src.core.schemas.inbox import (
        DraftTone,
        EmailDraft,
        EmailMessage,
        FetchResult,
        InboxAnalysis,
        SendResult,
    )


@runtime_checkable
class InboxConnector(Protocol):
    """Protocol implemented by every inbox collaborator backend."""

    name: str
    is_configured: bool  # True when required env vars / config are present

    async def fetch(self) -> FetchResult:
        """Return connection status plus unread/flagged messages.

        A missing mailbox link is reported as ``connected=False`` with a
        human-readable ``message``, never raised.
        """
        ...

    async def analyze(
        self,
        emails: list[EmailMessage],
        provider: str,
        connected_account: str,
    ) -> InboxAnalysis:
        """Prioritize and summarize *emails* into three buckets."""
        ...

    async def draft_reply(
        self,
        original_email: dict[str, Any],
        tone: DraftTone,
        instructions: str | None = None,
        user_context: dict[str, Any] | None = None,
    ) -> EmailDraft:
        """Compose a reply to *original_email*."""
        ...

    async def send_email(
        self,
        original_email_id: str,
        subject: str,
        body: str,
        to: str,
    ) -> SendResult:
        """Transmit a reply. The full draft payload is always passed."""
        ...
