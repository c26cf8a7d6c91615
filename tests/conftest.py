"""Test fixtures for the inbox assistant."""

import os
from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

# Set test environment before importing app modules
os.environ.setdefault("SUPABASE_URL", "https://test-ref.supabase.co")
os.environ.setdefault("SUPABASE_ACCESS_TOKEN", "test_token")
os.environ.setdefault("APP_ENV", "testing")
os.environ["LANGFUSE_PUBLIC_KEY"] = ""

from src.core.schemas.inbox import (
    AnalyzedEmail,
    EmailDraft,
    EmailMessage,
    FetchResult,
    InboxAnalysis,
    InboxFetchData,
    SendResult,
)
from src.orchestrators.email.assistant import EmailAssistant

ANALYZED_AT = datetime(2025, 3, 14, 9, 30, tzinfo=UTC)


def make_email(email_id: str, priority: str, **overrides) -> AnalyzedEmail:
    fields = {
        "id": email_id,
        "subject": f"Subject {email_id}",
        "from_": f"Sender {email_id} <{email_id.lower()}@example.com>",
        "snippet": f"Snippet {email_id}",
        "date": "Fri, 14 Mar 2025 08:15:00 +0000",
        "is_unread": True,
        "labels": ["UNREAD"],
        "priority": priority,
        "category": "Client Request",
        "summary": f"Summary of {email_id}",
    }
    fields.update(overrides)
    return AnalyzedEmail(**fields)


def make_analysis(urgent=(), needs_response=(), fyi=(), **overrides) -> InboxAnalysis:
    fields = {
        "provider": "Gmail",
        "connected_account": "owner@acme.com",
        "analyzed_at": ANALYZED_AT,
        "urgent": list(urgent),
        "needs_response": list(needs_response),
        "fyi": list(fyi),
        "summary": "You have 4 emails to review.",
    }
    fields.update(overrides)
    return InboxAnalysis(**fields)


def make_draft(email_id: str = "B", **overrides) -> EmailDraft:
    fields = {
        "subject": f"Re: Subject {email_id}",
        "body": "Thanks for reaching out. I'll follow up tomorrow.",
        "tone": "professional",
        "original_email_id": email_id,
    }
    fields.update(overrides)
    return EmailDraft(**fields)


@pytest.fixture
def email_a():
    return make_email("A", "urgent", suggested_action="Pay the invoice today")


@pytest.fixture
def email_b():
    return make_email("B", "needs_response")


@pytest.fixture
def email_c():
    return make_email("C", "needs_response", subject="Quarterly budget review")


@pytest.fixture
def email_d():
    return make_email("D", "fyi", from_="Newsletter <news@example.com>")


@pytest.fixture
def analysis(email_a, email_b, email_c, email_d):
    """urgent=[A], needs_response=[B, C], fyi=[D]."""
    return make_analysis(urgent=[email_a], needs_response=[email_b, email_c], fyi=[email_d])


@pytest.fixture
def fetched_emails(analysis):
    return [
        EmailMessage.model_validate(e.model_dump(include=set(EmailMessage.model_fields)))
        for e in [*analysis.urgent, *analysis.needs_response, *analysis.fyi]
    ]


@pytest.fixture
def connector(analysis, fetched_emails):
    """Fake collaborator backend: connected mailbox with four emails."""
    mock = AsyncMock()
    mock.name = "fake"
    mock.is_configured = True
    mock.fetch = AsyncMock(
        return_value=FetchResult(
            connected=True,
            data=InboxFetchData(
                provider="Gmail",
                connected_account="owner@acme.com",
                emails=fetched_emails,
            ),
        )
    )
    mock.analyze = AsyncMock(return_value=analysis)
    mock.draft_reply = AsyncMock(side_effect=lambda original, tone, **kw: make_draft(
        original["id"], tone=tone
    ))
    mock.send_email = AsyncMock(return_value=SendResult(success=True, message_id="sent-1"))
    return mock


@pytest.fixture
def disconnected_connector():
    mock = AsyncMock()
    mock.fetch = AsyncMock(
        return_value=FetchResult(
            connected=False,
            message="No email account connected.",
        )
    )
    return mock


@pytest.fixture
def assistant(connector):
    return EmailAssistant(connector, user_name="Jordan")
