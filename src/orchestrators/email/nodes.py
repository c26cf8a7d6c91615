"""Email dialogue graph nodes — one per EmailAction type.

Each node reads the inbox store from the run config, reads the session
fields from the graph state, and returns only the fields it changes plus
``response_text``. A node that cannot meet its precondition returns a
guidance message and leaves the session fields alone.
"""

import logging
from typing import Any

from langchain_core.runnables import RunnableConfig

from src.core.config import settings
from src.core.email_intent import EmailActionType
from src.core.formatting import (
    DRAFT_FAILED_MESSAGE,
    NO_ANALYSIS_MESSAGE,
    NO_DRAFT_TO_REFINE_MESSAGE,
    NO_DRAFT_TO_SEND_MESSAGE,
    NO_EMAIL_SELECTED_MESSAGE,
    NO_EMAILS_LOADED_MESSAGE,
    NO_EMAILS_TO_SHOW_MESSAGE,
    NO_URGENT_FOUND_MESSAGE,
    NO_URGENT_MESSAGE,
    NOT_CONNECTED_MESSAGE,
    REFINE_FAILED_MESSAGE,
    SCAN_FAILED_MESSAGE,
    format_analysis_for_chat,
    format_draft_for_chat,
    format_send_failure,
    format_send_success,
    format_single_email_for_chat,
)
from src.core.inbox_store import InboxAnalysisStore
from src.core.schemas.inbox import DraftTone
from src.core.sequencer import (
    all_emails_in_order,
    first_index_of_priority,
    get_email_by_number,
)
from src.orchestrators.email.state import EmailState

logger = logging.getLogger(__name__)

REFINE_TONE: DraftTone = "professional"


def _store(config: RunnableConfig) -> InboxAnalysisStore:
    return config["configurable"]["store"]


def _cursor(state: EmailState, total: int) -> int:
    """Current index clamped into [0, total-1]; a rescan may have shrunk the list."""
    index = state.get("current_email_index", 0)
    if total <= 0:
        return 0
    return max(0, min(index, total - 1))


def _show(emails: list, index: int) -> dict[str, Any]:
    return {
        "current_email_index": index,
        "response_text": format_single_email_for_chat(emails[index], index + 1, len(emails)),
    }


# ------------------------------------------------------------------
# Inbox and navigation
# ------------------------------------------------------------------
async def scan_inbox(state: EmailState, config: RunnableConfig) -> dict[str, Any]:
    store = _store(config)
    result = await store.analyze_inbox()
    if result is None:
        status = store.status
        if store.error is None and status is not None and not status.connected:
            return {"response_text": NOT_CONNECTED_MESSAGE}
        return {"response_text": SCAN_FAILED_MESSAGE}
    return {"current_email_index": 0, "response_text": format_analysis_for_chat(result)}


async def show_emails(state: EmailState, config: RunnableConfig) -> dict[str, Any]:
    emails = all_emails_in_order(_store(config).analysis)
    if not emails:
        return {"response_text": NO_EMAILS_TO_SHOW_MESSAGE}
    return _show(emails, 0)


async def next_email(state: EmailState, config: RunnableConfig) -> dict[str, Any]:
    emails = all_emails_in_order(_store(config).analysis)
    if not emails:
        return {"response_text": NO_EMAILS_LOADED_MESSAGE}
    return _show(emails, min(_cursor(state, len(emails)) + 1, len(emails) - 1))


async def prev_email(state: EmailState, config: RunnableConfig) -> dict[str, Any]:
    emails = all_emails_in_order(_store(config).analysis)
    if not emails:
        return {"response_text": NO_EMAILS_LOADED_MESSAGE}
    return _show(emails, max(_cursor(state, len(emails)) - 1, 0))


async def skip_to_urgent(state: EmailState, config: RunnableConfig) -> dict[str, Any]:
    analysis = _store(config).analysis
    if analysis is None:
        return {"response_text": NO_EMAILS_LOADED_MESSAGE}
    if not analysis.urgent:
        return {"response_text": NO_URGENT_MESSAGE}
    index = first_index_of_priority(analysis, "urgent")
    if index is None:
        return {"response_text": NO_URGENT_FOUND_MESSAGE}
    return _show(all_emails_in_order(analysis), index)


async def back_to_summary(state: EmailState, config: RunnableConfig) -> dict[str, Any]:
    analysis = _store(config).analysis
    if analysis is None:
        return {"response_text": NO_ANALYSIS_MESSAGE}
    return {"response_text": format_analysis_for_chat(analysis)}


# ------------------------------------------------------------------
# Draft lifecycle
# ------------------------------------------------------------------
async def draft_reply(state: EmailState, config: RunnableConfig) -> dict[str, Any]:
    store = _store(config)
    action = state["action"]
    if action.email_index is not None:
        target = get_email_by_number(store.analysis, action.email_index + 1)
    else:
        emails = all_emails_in_order(store.analysis)
        target = emails[_cursor(state, len(emails))] if emails else None
    if target is None:
        return {"response_text": NO_EMAIL_SELECTED_MESSAGE}

    draft = await store.draft_reply(
        target,
        action.tone or settings.default_draft_tone,
        action.instructions,
        user_name=state.get("user_name"),
    )
    if draft is None:
        return {"response_text": DRAFT_FAILED_MESSAGE}

    logger.info("Drafted %s reply to email %s", draft.tone, target.id)
    return {
        "current_draft": draft,
        "last_draft_email": target,
        "response_text": format_draft_for_chat(draft, target.subject),
    }


async def send_draft(state: EmailState, config: RunnableConfig) -> dict[str, Any]:
    draft = state.get("current_draft")
    if draft is None:
        return {"response_text": NO_DRAFT_TO_SEND_MESSAGE}

    store = _store(config)
    result = await store.send_draft(draft)
    if not result.success:
        return {"response_text": format_send_failure(result.error)}

    total = len(all_emails_in_order(store.analysis))
    has_more = _cursor(state, total) + 1 < total
    return {"current_draft": None, "response_text": format_send_success(has_more)}


async def refine_draft(state: EmailState, config: RunnableConfig) -> dict[str, Any]:
    target = state.get("last_draft_email")
    if state.get("current_draft") is None or target is None:
        return {"response_text": NO_DRAFT_TO_REFINE_MESSAGE}

    refined = await _store(config).draft_reply(
        target,
        REFINE_TONE,
        state["action"].instructions,
        user_name=state.get("user_name"),
    )
    if refined is None:
        return {"response_text": REFINE_FAILED_MESSAGE}
    return {
        "current_draft": refined,
        "response_text": format_draft_for_chat(refined, target.subject),
    }


ACTION_NODES = {
    EmailActionType.scan_inbox: scan_inbox,
    EmailActionType.show_emails: show_emails,
    EmailActionType.next_email: next_email,
    EmailActionType.prev_email: prev_email,
    EmailActionType.skip_to_urgent: skip_to_urgent,
    EmailActionType.back_to_summary: back_to_summary,
    EmailActionType.draft_reply: draft_reply,
    EmailActionType.send_draft: send_draft,
    EmailActionType.refine_draft: refine_draft,
}


def route_email_action(state: EmailState) -> str:
    """Pick the node for the parsed action."""
    return str(state["action"].type)
