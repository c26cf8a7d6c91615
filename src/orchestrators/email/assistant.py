"""Email assistant — one chat conversation over the inbox.

Owns the session, runs actions through the dialogue executor one at a time,
and describes the inbox state for the surrounding chat prompt.
"""

import asyncio
import logging

from src.core.connectors.base import InboxConnector
from src.core.email_intent import EmailAction, parse_email_intent
from src.core.inbox_store import InboxAnalysisStore
from src.core.notifications import NoticeBoard
from src.core.schemas.inbox import AnalyzedEmail, EmailDraft, InboxAnalysis
from src.core.sequencer import (
    all_emails_in_order,
    find_email_by_keyword,
    get_email_by_number,
)
from src.orchestrators.email.graph import EmailDialogueExecutor
from src.orchestrators.email.state import EmailContext, EmailSession

logger = logging.getLogger(__name__)

NOT_SCANNED_PROMPT_CONTEXT = (
    "The user has not scanned their inbox yet. If they ask about email, "
    'suggest they say "scan inbox" to check their email.'
)


class EmailAssistant:
    """Parses utterances and executes email actions for a single session.

    Calls to ``execute``/``handle`` are serialized: an overlapping call waits
    for the running one to finish, then sees its resulting session.
    """

    def __init__(
        self,
        connector: InboxConnector,
        user_name: str | None = None,
        notices: NoticeBoard | None = None,
    ):
        self.store = InboxAnalysisStore(connector, notices)
        self.session = EmailSession()
        self._executor = EmailDialogueExecutor(self.store, user_name=user_name)
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------
    @property
    def analysis(self) -> InboxAnalysis | None:
        return self.store.analysis

    @property
    def notices(self) -> NoticeBoard:
        return self.store.notices

    @property
    def all_emails(self) -> list[AnalyzedEmail]:
        return all_emails_in_order(self.store.analysis)

    @property
    def total_emails(self) -> int:
        return len(self.all_emails)

    @property
    def current_email(self) -> AnalyzedEmail | None:
        emails = self.all_emails
        if 0 <= self.session.current_email_index < len(emails):
            return emails[self.session.current_email_index]
        return None

    @property
    def user_name(self) -> str | None:
        return self._executor.user_name

    @user_name.setter
    def user_name(self, value: str | None) -> None:
        self._executor.user_name = value

    @property
    def current_draft(self) -> EmailDraft | None:
        return self.session.current_draft

    @property
    def is_processing(self) -> bool:
        store = self.store
        return self._lock.locked() or store.is_loading or store.is_analyzing or store.is_sending

    def email_by_number(self, number: int) -> AnalyzedEmail | None:
        return get_email_by_number(self.store.analysis, number)

    def find_email(self, keyword: str) -> AnalyzedEmail | None:
        return find_email_by_keyword(self.store.analysis, keyword)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def parse(self, message: str) -> EmailAction | None:
        return parse_email_intent(message, has_draft=self.session.current_draft is not None)

    async def execute(self, action: EmailAction) -> str:
        async with self._lock:
            return await self._run(action)

    async def handle(self, message: str) -> str | None:
        """Parse and execute; None when the message is not an email request."""
        async with self._lock:
            action = self.parse(message)
            if action is None:
                return None
            return await self._run(action)

    async def _run(self, action: EmailAction) -> str:
        logger.debug("Executing email action %s", action.type)
        outcome = await self._executor.execute(action, self.session)
        self.session = outcome.session
        return outcome.response_text

    def clear_draft(self) -> None:
        """Abandon the current draft."""
        self.session = EmailSession(
            current_email_index=self.session.current_email_index,
            last_draft_email=self.session.last_draft_email,
        )

    # ------------------------------------------------------------------
    # Chat context
    # ------------------------------------------------------------------
    def get_email_context(self) -> EmailContext:
        return EmailContext(
            has_analysis=self.store.analysis is not None,
            analysis=self.store.analysis,
            current_email_index=self.session.current_email_index + 1,
            current_email=self.current_email,
            current_draft=self.session.current_draft,
            total_emails=self.total_emails,
            is_processing=self.is_processing,
        )

    def build_email_context_for_prompt(self) -> str:
        """Plain-text inbox state for the general chat model's system prompt."""
        ctx = self.get_email_context()
        if not ctx.has_analysis or ctx.analysis is None:
            return NOT_SCANNED_PROMPT_CONTEXT

        analysis = ctx.analysis
        lines = [
            "EMAIL CONTEXT:",
            f"- Connected to: {analysis.connected_account} ({analysis.provider})",
            f"- Total emails: {ctx.total_emails}",
            f"- Urgent: {len(analysis.urgent)}",
            f"- Needs response: {len(analysis.needs_response)}",
            f"- FYI: {len(analysis.fyi)}",
        ]
        if ctx.current_email:
            email = ctx.current_email
            lines.append("")
            lines.append(f"CURRENT EMAIL (#{ctx.current_email_index} of {ctx.total_emails}):")
            lines.append(f"- Subject: {email.subject}")
            lines.append(f"- From: {email.from_}")
            lines.append(f"- Priority: {email.priority}")
            lines.append(f"- Summary: {email.summary}")
        if ctx.current_draft:
            lines.append("")
            lines.append("DRAFT IN PROGRESS:")
            lines.append(f"- Subject: {ctx.current_draft.subject}")
            lines.append('- The user can say "send it" to send, or request changes.')
        return "\n".join(lines)
