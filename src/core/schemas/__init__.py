from src.core.schemas.inbox import (
    AnalyzedEmail,
    DraftTone,
    EmailDraft,
    EmailMessage,
    FetchResult,
    InboxAnalysis,
    InboxFetchData,
    InboxStatus,
    Priority,
    SendResult,
)

__all__ = [
    "AnalyzedEmail",
    "DraftTone",
    "EmailDraft",
    "EmailMessage",
    "FetchResult",
    "InboxAnalysis",
    "InboxFetchData",
    "InboxStatus",
    "Priority",
    "SendResult",
]
