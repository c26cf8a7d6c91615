"""Inbox analysis store — latest triage snapshot plus the calls that produce it.

Owns every call to the inbox collaborators. Failures never escape: they are
recorded in ``status``/``error``, surfaced as notices, and reported to the
caller as ``None`` (or an unsuccessful ``SendResult``).
"""

import logging
from datetime import UTC, datetime

from src.core.connectors.base import InboxConnector
from src.core.notifications import NoticeBoard
from src.core.schemas.inbox import (
    AnalyzedEmail,
    DraftTone,
    EmailDraft,
    InboxAnalysis,
    InboxStatus,
    SendResult,
)

logger = logging.getLogger(__name__)

EMPTY_INBOX_SUMMARY = "📭 **Your inbox is clear!** No unread or flagged emails from today."


class InboxAnalysisStore:
    def __init__(self, connector: InboxConnector, notices: NoticeBoard | None = None) -> None:
        self._connector = connector
        self.notices = notices or NoticeBoard()

        self.status: InboxStatus | None = None
        self.analysis: InboxAnalysis | None = None
        self.error: str | None = None

        self.is_loading = False
        self.is_fetching = False
        self.is_analyzing = False
        self.is_sending = False

    async def check_connection(self) -> InboxStatus:
        """Ask inbox-fetch whether a mailbox is linked. Never raises."""
        self.is_fetching = True
        self.error = None
        try:
            result = await self._connector.fetch()
            data = result.data
            status = InboxStatus(
                connected=result.connected,
                provider=data.provider if data else None,
                connected_account=data.connected_account if data else None,
                error=result.error,
                message=result.message,
            )
        except Exception as e:
            logger.warning("Inbox connection check failed: %s", e)
            self.error = str(e) or "Connection check failed"
            status = InboxStatus(connected=False, error=self.error)
        finally:
            self.is_fetching = False

        self.status = status
        return status

    async def analyze_inbox(self) -> InboxAnalysis | None:
        """Fetch, then analyze. Returns the new analysis or None."""
        self.is_loading = True
        self.is_analyzing = True
        self.error = None
        try:
            self.is_fetching = True
            try:
                fetched = await self._connector.fetch()
            finally:
                self.is_fetching = False

            if not fetched.connected:
                self.status = InboxStatus(
                    connected=False, message=fetched.message, error=fetched.error
                )
                logger.info("Inbox not connected: %s", fetched.message or fetched.error)
                return None

            data = fetched.data
            if data is None or not data.emails:
                empty = InboxAnalysis(
                    provider=(data.provider if data else "") or "Email",
                    connected_account=data.connected_account if data else "",
                    analyzed_at=datetime.now(UTC),
                    summary=EMPTY_INBOX_SUMMARY,
                )
                self.analysis = empty
                self.status = InboxStatus(
                    connected=True,
                    provider=data.provider if data else None,
                    connected_account=data.connected_account if data else None,
                )
                return empty

            logger.info("Analyzing %d emails from %s", len(data.emails), data.provider)
            result = await self._connector.analyze(
                data.emails, data.provider, data.connected_account
            )
            self.analysis = result
            self.status = InboxStatus(
                connected=True,
                provider=result.provider,
                connected_account=result.connected_account,
            )
            return result
        except Exception as e:
            logger.error("Inbox analysis failed: %s", e)
            self.error = str(e) or "Analysis failed"
            self.status = InboxStatus(connected=False, error=self.error)
            self.notices.error(self.error)
            return None
        finally:
            self.is_loading = False
            self.is_analyzing = False

    async def draft_reply(
        self,
        email: AnalyzedEmail,
        tone: DraftTone = "professional",
        instructions: str | None = None,
        user_name: str | None = None,
    ) -> EmailDraft | None:
        """Ask draft-email-reply for a reply; the recipient is the original sender."""
        try:
            draft = await self._connector.draft_reply(
                {
                    "id": email.id,
                    "subject": email.subject,
                    "from": email.from_,
                    "snippet": email.snippet,
                    "summary": email.summary,
                },
                tone,
                instructions=instructions,
                user_context={"userName": user_name} if user_name else None,
            )
        except Exception as e:
            logger.warning("Draft reply failed for email %s: %s", email.id, e)
            self.notices.error(str(e) or "Draft failed")
            return None
        return draft.model_copy(update={"to": email.from_})

    async def send_draft(self, draft: EmailDraft) -> SendResult:
        """Send *draft* to its recipient. The payload is always passed explicitly."""
        if not draft.to:
            return SendResult(success=False, error="No recipient found for this draft.")

        self.is_sending = True
        try:
            result = await self._connector.send_email(
                draft.original_email_id, draft.subject, draft.body, draft.to
            )
        except Exception as e:
            logger.error("Send failed for reply to %s: %s", draft.original_email_id, e)
            message = str(e) or "Send failed"
            self.notices.error(message)
            return SendResult(success=False, error=message)
        finally:
            self.is_sending = False

        if result.success:
            self.notices.success("Email sent successfully!")
        else:
            logger.warning("send-email reported failure: %s", result.error)
        return result
