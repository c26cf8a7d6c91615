"""Inbox records exchanged with the edge functions.

The functions speak camelCase JSON; models accept either the wire alias or
the snake_case field name and dump back to the wire shape with
``model_dump(by_alias=True)``.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

Priority = Literal["urgent", "needs_response", "fyi"]
DraftTone = Literal["professional", "friendly", "brief", "detailed"]


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EmailMessage(_WireModel):
    model_config = ConfigDict(frozen=True)

    id: str
    subject: str = ""
    from_: str = Field(default="", alias="from")
    snippet: str = ""
    date: str = ""  # provider format: RFC 2822 (Gmail) or ISO 8601 (Graph)
    is_unread: bool = False
    labels: list[str] = Field(default_factory=list)


class AnalyzedEmail(EmailMessage):
    priority: Priority
    category: str = ""
    summary: str = ""
    suggested_action: str | None = None


class InboxAnalysis(_WireModel):
    model_config = ConfigDict(frozen=True)

    provider: str
    connected_account: str = ""
    analyzed_at: datetime
    urgent: list[AnalyzedEmail] = Field(default_factory=list)
    needs_response: list[AnalyzedEmail] = Field(default_factory=list)
    fyi: list[AnalyzedEmail] = Field(default_factory=list)
    summary: str = ""

    @model_validator(mode="after")
    def _buckets_are_disjoint(self) -> "InboxAnalysis":
        seen: set[str] = set()
        for email in [*self.urgent, *self.needs_response, *self.fyi]:
            if email.id in seen:
                raise ValueError(f"email {email.id} appears in more than one bucket")
            seen.add(email.id)
        return self


class InboxStatus(_WireModel):
    connected: bool
    provider: str | None = None
    connected_account: str | None = None
    error: str | None = None
    message: str | None = None


class InboxFetchData(_WireModel):
    provider: str = "Email"
    connected_account: str = ""
    emails: list[EmailMessage] = Field(default_factory=list)


class FetchResult(_WireModel):
    """Response body of inbox-fetch."""

    connected: bool
    data: InboxFetchData | None = None
    message: str | None = None
    error: str | None = None


class EmailDraft(_WireModel):
    subject: str
    body: str
    tone: DraftTone = "professional"
    original_email_id: str
    to: str | None = None


class SendResult(_WireModel):
    success: bool
    message_id: str | None = None
    error: str | None = None
