"""Email intent parser — keyword rules over a chat utterance.

Rules are evaluated in order and the first match wins. Scan/check phrasing
sits ahead of the draft-refinement keywords so "check my email" can never be
read as a refinement, and refinement only fires while a draft exists.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from src.core.schemas.inbox import DraftTone


class EmailActionType(StrEnum):
    scan_inbox = "scan_inbox"
    show_emails = "show_emails"
    next_email = "next_email"
    prev_email = "prev_email"
    skip_to_urgent = "skip_to_urgent"
    back_to_summary = "back_to_summary"
    draft_reply = "draft_reply"
    send_draft = "send_draft"
    refine_draft = "refine_draft"


@dataclass(frozen=True)
class EmailAction:
    type: EmailActionType
    email_index: int | None = None  # 0-based, draft_reply only
    tone: DraftTone | None = None
    instructions: str | None = None


@dataclass(frozen=True)
class IntentRule:
    action: EmailActionType
    matches: Callable[[str, bool], bool]  # (lowered text, has_draft)
    build: Callable[[str, str], EmailAction] | None = None  # (lowered, original)

    def to_action(self, lower: str, original: str) -> EmailAction:
        if self.build:
            return self.build(lower, original)
        return EmailAction(type=self.action)


_EMAIL_NUMBER_RE = re.compile(r"(?:to\s+)?(?:#|number\s+)?(\d+)")

_SCAN_EXACT = {"scan inbox", "check email", "check my email"}
_SEND_EXACT = {"send it", "send", "send draft", "send the email"}
_REFINE_KEYWORDS = (
    "make it",
    "add ",
    "change ",
    "shorter",
    "longer",
    "more friendly",
    "more professional",
)


def _contains_any(text: str, *needles: str) -> bool:
    return any(n in text for n in needles)


def _is_scan(text: str, _has_draft: bool) -> bool:
    mentions_mail = _contains_any(text, "inbox", "email")
    return (
        ("scan" in text and mentions_mail)
        or ("check" in text and mentions_mail)
        or "inbox intelligence" in text
        or text in _SCAN_EXACT
    )


def _detect_tone(text: str) -> DraftTone:
    if "friendly" in text:
        return "friendly"
    if _contains_any(text, "brief", "short"):
        return "brief"
    if "detailed" in text:
        return "detailed"
    return "professional"


def _build_draft_reply(lower: str, _original: str) -> EmailAction:
    match = _EMAIL_NUMBER_RE.search(lower)
    email_index = int(match.group(1)) - 1 if match else None
    return EmailAction(
        type=EmailActionType.draft_reply,
        email_index=email_index,
        tone=_detect_tone(lower),
    )


def _build_refine(_lower: str, original: str) -> EmailAction:
    return EmailAction(type=EmailActionType.refine_draft, instructions=original)


EMAIL_INTENT_RULES: tuple[IntentRule, ...] = (
    IntentRule(EmailActionType.scan_inbox, _is_scan),
    IntentRule(
        EmailActionType.show_emails,
        lambda t, _: "show email" in t or t in ("show emails", "list emails"),
    ),
    IntentRule(EmailActionType.next_email, lambda t, _: t in ("next", "next email")),
    IntentRule(EmailActionType.prev_email, lambda t, _: t in ("back", "previous", "prev")),
    IntentRule(
        EmailActionType.skip_to_urgent,
        lambda t, _: _contains_any(t, "skip to urgent", "urgent only"),
    ),
    IntentRule(
        EmailActionType.back_to_summary,
        lambda t, _: _contains_any(t, "back to summary", "show summary"),
    ),
    IntentRule(
        EmailActionType.draft_reply,
        lambda t, _: _contains_any(t, "draft reply", "draft a reply", "write reply"),
        _build_draft_reply,
    ),
    IntentRule(EmailActionType.send_draft, lambda t, _: t in _SEND_EXACT),
    IntentRule(
        EmailActionType.refine_draft,
        lambda t, has_draft: has_draft and _contains_any(t, *_REFINE_KEYWORDS),
        _build_refine,
    ),
)


def parse_email_intent(message: str, has_draft: bool = False) -> EmailAction | None:
    """Map an utterance to an EmailAction, or None when it is not an email request."""
    lower = (message or "").lower().strip()
    if not lower:
        return None
    for rule in EMAIL_INTENT_RULES:
        if rule.matches(lower, has_draft):
            return rule.to_action(lower, message)
    return None
