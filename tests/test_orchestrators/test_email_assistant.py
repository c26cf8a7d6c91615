"""End-to-end conversation tests for the email assistant."""

import asyncio
from unittest.mock import AsyncMock

import pytest
from conftest import make_analysis

from src.core.email_intent import EmailAction, EmailActionType
from src.core.exceptions import ConnectionCheckError
from src.core.formatting import (
    NO_DRAFT_TO_SEND_MESSAGE,
    NO_EMAILS_TO_SHOW_MESSAGE,
    NOT_CONNECTED_MESSAGE,
    SCAN_FAILED_MESSAGE,
)
from src.core.schemas.inbox import FetchResult, InboxFetchData, SendResult
from src.orchestrators.email.assistant import EmailAssistant


async def test_unrelated_message_is_not_handled(assistant, connector):
    assert await assistant.handle("what's the weather like?") is None
    assert await assistant.handle("   ") is None
    connector.fetch.assert_not_called()


async def test_triage_walkthrough(assistant, connector):
    report = await assistant.handle("scan inbox")
    assert report.startswith("📧 **Inbox Intelligence Report**")
    assert assistant.total_emails == 4

    text = await assistant.handle("skip to urgent")
    assert text.startswith("📧 **Email 1 of 4** 🔴 URGENT")
    assert assistant.current_email.id == "A"

    text = await assistant.handle("next")
    assert text.startswith("📧 **Email 2 of 4**")
    assert assistant.current_email.id == "B"

    text = await assistant.handle("draft reply")
    assert "Replying to: *Subject B*" in text
    assert assistant.current_draft.original_email_id == "B"

    text = await assistant.handle("send it")
    assert 'Say **"next"** to continue' in text
    assert assistant.current_draft is None
    connector.send_email.assert_awaited_once_with(
        "B",
        "Re: Subject B",
        "Thanks for reaching out. I'll follow up tomorrow.",
        "Sender B <b@example.com>",
    )


async def test_draft_by_number(assistant, connector):
    await assistant.handle("scan inbox")

    text = await assistant.handle("draft reply to #3")

    assert "Replying to: *Quarterly budget review*" in text
    assert connector.draft_reply.await_args.args[0]["id"] == "C"
    assert assistant.session.current_email_index == 0


async def test_draft_tone_from_wording(assistant, connector):
    await assistant.handle("scan inbox")

    await assistant.handle("draft a reply, keep it short")

    assert connector.draft_reply.await_args.args[1] == "brief"


async def test_navigation_clamps_at_both_ends(assistant):
    await assistant.handle("scan inbox")

    await assistant.handle("back")
    assert assistant.session.current_email_index == 0

    for _ in range(6):
        await assistant.handle("next")
    assert assistant.session.current_email_index == 3
    assert assistant.current_email.id == "D"


async def test_empty_inbox_then_show_emails(connector):
    connector.fetch = AsyncMock(
        return_value=FetchResult(
            connected=True,
            data=InboxFetchData(provider="Gmail", connected_account="me@acme.com", emails=[]),
        )
    )
    assistant = EmailAssistant(connector)

    report = await assistant.handle("check my email")
    assert "Your inbox is clear!" in report

    assert await assistant.handle("show emails") == NO_EMAILS_TO_SHOW_MESSAGE


async def test_second_send_has_no_draft(assistant, connector):
    await assistant.handle("scan inbox")
    await assistant.handle("draft reply")
    await assistant.handle("send it")

    assert await assistant.handle("send it") == NO_DRAFT_TO_SEND_MESSAGE
    assert connector.send_email.await_count == 1


async def test_refine_redrafts_last_drafted_email_professionally(assistant, connector):
    await assistant.handle("scan inbox")
    await assistant.handle("draft reply to #3, make it friendly")
    await assistant.handle("next")

    text = await assistant.handle("Add that I'm out on Friday")

    last_call = connector.draft_reply.await_args
    assert last_call.args[0]["id"] == "C"
    assert last_call.args[1] == "professional"
    assert last_call.kwargs["instructions"] == "Add that I'm out on Friday"
    assert "Replying to: *Quarterly budget review*" in text


async def test_refine_words_without_draft_are_not_handled(assistant):
    await assistant.handle("scan inbox")
    assert await assistant.handle("make it shorter") is None


async def test_check_email_with_draft_rescans(assistant, connector):
    await assistant.handle("scan inbox")
    await assistant.handle("draft reply")

    text = await assistant.handle("check my email")

    assert text.startswith("📧 **Inbox Intelligence Report**")
    assert connector.analyze.await_count == 2


async def test_disconnected(disconnected_connector):
    assistant = EmailAssistant(disconnected_connector)
    assert await assistant.handle("scan inbox") == NOT_CONNECTED_MESSAGE
    assert assistant.analysis is None


async def test_overlapping_turns_run_one_at_a_time(assistant, connector, analysis):
    release = asyncio.Event()
    order = []

    async def slow_analyze(*args):
        order.append("analyze-start")
        await release.wait()
        order.append("analyze-end")
        return analysis

    connector.analyze = AsyncMock(side_effect=slow_analyze)

    scan = asyncio.create_task(assistant.handle("scan inbox"))
    await asyncio.sleep(0)
    nav = asyncio.create_task(assistant.handle("next"))
    await asyncio.sleep(0)

    assert assistant.is_processing is True
    assert not nav.done()

    release.set()
    await scan
    text = await nav

    assert order == ["analyze-start", "analyze-end"]
    # "next" observed the finished scan's session
    assert text.startswith("📧 **Email 2 of 4**")
    assert assistant.is_processing is False


async def test_execute_runs_prebuilt_action(assistant):
    await assistant.execute(EmailAction(type=EmailActionType.scan_inbox))
    text = await assistant.execute(EmailAction(type=EmailActionType.show_emails))
    assert text.startswith("📧 **Email 1 of 4**")


async def test_clear_draft_keeps_cursor(assistant):
    await assistant.handle("scan inbox")
    await assistant.handle("next")
    await assistant.handle("draft reply")

    assistant.clear_draft()

    assert assistant.current_draft is None
    assert assistant.session.current_email_index == 1
    assert assistant.session.last_draft_email.id == "B"


async def test_email_lookups(assistant):
    await assistant.handle("scan inbox")
    assert assistant.email_by_number(4).id == "D"
    assert assistant.find_email("budget").id == "C"


async def test_email_context(assistant):
    await assistant.handle("scan inbox")
    await assistant.handle("next")

    ctx = assistant.get_email_context()

    assert ctx.has_analysis is True
    assert ctx.current_email_index == 2
    assert ctx.current_email.id == "B"
    assert ctx.total_emails == 4
    assert ctx.is_processing is False


def test_prompt_context_before_scan(assistant):
    assert assistant.build_email_context_for_prompt().startswith(
        "The user has not scanned their inbox yet."
    )


async def test_prompt_context_with_draft(assistant):
    await assistant.handle("scan inbox")
    await assistant.handle("draft reply")

    text = assistant.build_email_context_for_prompt()

    assert text.split("\n")[:6] == [
        "EMAIL CONTEXT:",
        "- Connected to: owner@acme.com (Gmail)",
        "- Total emails: 4",
        "- Urgent: 1",
        "- Needs response: 2",
        "- FYI: 1",
    ]
    assert "CURRENT EMAIL (#1 of 4):" in text
    assert "- Subject: Subject A" in text
    assert "DRAFT IN PROGRESS:" in text
    assert "- Subject: Re: Subject A" in text


async def test_rescan_replaces_analysis(assistant, connector, email_d):
    await assistant.handle("scan inbox")
    connector.analyze = AsyncMock(return_value=make_analysis(fyi=[email_d]))

    await assistant.handle("scan inbox")

    assert assistant.total_emails == 1


async def test_fetch_error_after_disconnect_asks_to_retry(disconnected_connector):
    assistant = EmailAssistant(disconnected_connector)
    assert await assistant.handle("scan inbox") == NOT_CONNECTED_MESSAGE

    disconnected_connector.fetch = AsyncMock(
        side_effect=ConnectionCheckError("inbox-fetch", "timeout")
    )

    assert await assistant.handle("scan inbox") == SCAN_FAILED_MESSAGE
    assert assistant.store.status.connected is False
    assert assistant.store.status.error == "timeout"


async def test_cancelled_draft_leaves_session(assistant, connector):
    await assistant.handle("scan inbox")
    await assistant.handle("next")
    before = assistant.session
    started = asyncio.Event()

    async def never_finishes(*args, **kwargs):
        started.set()
        await asyncio.Event().wait()

    connector.draft_reply = AsyncMock(side_effect=never_finishes)

    task = asyncio.create_task(assistant.handle("draft reply"))
    await started.wait()
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert assistant.session is before
    assert assistant.current_draft is None
    assert assistant.is_processing is False


async def test_is_processing_while_sending(assistant, connector):
    await assistant.handle("scan inbox")
    await assistant.handle("draft reply")
    release = asyncio.Event()
    seen = {}

    async def slow_send(*args):
        seen["processing"] = assistant.is_processing
        seen["sending"] = assistant.store.is_sending
        await release.wait()
        return SendResult(success=True, message_id="m")

    connector.send_email = AsyncMock(side_effect=slow_send)

    task = asyncio.create_task(assistant.handle("send it"))
    while "sending" not in seen:
        await asyncio.sleep(0)
    release.set()
    await task

    assert seen == {"processing": True, "sending": True}
    assert assistant.store.is_sending is False
