"""Email dialogue state definitions."""

from dataclasses import dataclass
from typing import TypedDict

from src.core.email_intent import EmailAction
from src.core.schemas.inbox import AnalyzedEmail, EmailDraft, InboxAnalysis


@dataclass(frozen=True)
class EmailSession:
    """Conversation cursor and draft for one chat session.

    Passed into the dialogue executor and returned as a new instance; the
    executor never mutates the one it was given.
    """

    current_email_index: int = 0  # 0-based into priority order
    current_draft: EmailDraft | None = None
    last_draft_email: AnalyzedEmail | None = None


class EmailState(TypedDict, total=False):
    """State for the email LangGraph dialogue graph."""

    action: EmailAction
    user_name: str | None

    # Session fields, read and written by action nodes
    current_email_index: int
    current_draft: EmailDraft | None
    last_draft_email: AnalyzedEmail | None

    # Final output
    response_text: str


@dataclass(frozen=True)
class ActionOutcome:
    response_text: str
    session: EmailSession


@dataclass(frozen=True)
class EmailContext:
    """Read-only snapshot of the email conversation for the surrounding chat."""

    has_analysis: bool
    analysis: InboxAnalysis | None
    current_email_index: int  # 1-based for display
    current_email: AnalyzedEmail | None
    current_draft: EmailDraft | None
    total_emails: int
    is_processing: bool
