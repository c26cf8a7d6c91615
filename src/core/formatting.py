"""Chat markup for inbox analysis, single emails and drafts.

Pure string builders: same input, same output. The dialogue executor renders
every inbox response through this module.
"""

from datetime import datetime
from email.utils import parsedate_to_datetime

from src.core.config import settings
from src.core.schemas.inbox import AnalyzedEmail, EmailDraft, InboxAnalysis

PRIORITY_ICONS = {"urgent": "🔴", "needs_response": "🟡", "fyi": "🟢"}
PRIORITY_LABELS = {"urgent": "URGENT", "needs_response": "NEEDS RESPONSE", "fyi": "FYI"}

SYNC_TIME_FORMAT = "%b %d, %H:%M"
RECEIVED_FORMAT = "%b %d, %Y %H:%M"

# Guidance and error replies used by the dialogue executor
NOT_CONNECTED_MESSAGE = (
    "📭 **No email connected**\n\n"
    "To use inbox intelligence, please connect your Google Workspace or Microsoft 365 "
    "account in **Settings → Integrations**.\n\n"
    "Once connected, I can:\n"
    "• Scan and prioritize your emails\n"
    "• Draft contextual replies\n"
    "• Help you process your inbox efficiently\n\n"
    'Then say **"scan inbox"**.'
)
SCAN_FAILED_MESSAGE = (
    'I couldn\'t analyze your inbox right now. Please say **"scan inbox"** to try again.'
)
NO_EMAILS_TO_SHOW_MESSAGE = '📭 No emails to show. Say **"scan inbox"** first to check your email.'
NO_EMAILS_LOADED_MESSAGE = '📭 No emails loaded. Say **"scan inbox"** first.'
NO_ANALYSIS_MESSAGE = '📭 No analysis available. Say **"scan inbox"** to check your email.'
NO_URGENT_MESSAGE = (
    "✅ **No urgent emails!** Your inbox is in good shape.\n\n"
    'Say **"show emails"** to review all emails, or **"back to summary"** for the overview.'
)
NO_URGENT_FOUND_MESSAGE = 'No urgent emails found. Say **"show emails"** to review all emails.'
NO_EMAIL_SELECTED_MESSAGE = (
    "❌ No email selected to reply to.\n\n"
    'Say **"scan inbox"** first, then **"show emails"** to select one.'
)
DRAFT_FAILED_MESSAGE = '❌ Couldn\'t generate a draft. Say **"draft reply"** to try again.'
NO_DRAFT_TO_SEND_MESSAGE = '❌ No draft to send. Say **"draft reply"** first to create one.'
NO_DRAFT_TO_REFINE_MESSAGE = '❌ No draft to refine. Say **"draft reply"** first.'
REFINE_FAILED_MESSAGE = (
    "❌ Couldn't refine the draft. Say your change again, "
    'or **"send it"** to send the current version.'
)


def format_timestamp(value: datetime, fmt: str = SYNC_TIME_FORMAT) -> str:
    return value.strftime(fmt)


def format_received(raw: str) -> str:
    """Render a provider date string (RFC 2822 or ISO 8601); unknown formats pass through."""
    if not raw:
        return "unknown"
    try:
        return parsedate_to_datetime(raw).strftime(RECEIVED_FORMAT)
    except (TypeError, ValueError, IndexError):
        pass
    try:
        return datetime.fromisoformat(raw).strftime(RECEIVED_FORMAT)
    except ValueError:
        return raw


def _format_entry(number: int, email: AnalyzedEmail) -> list[str]:
    lines = [
        f"{number}. **{email.subject}**",
        f"   From: {email.from_}",
        f"   {email.summary}",
    ]
    if email.suggested_action:
        lines.append(f"   💡 {email.suggested_action}")
    return lines


def format_analysis_for_chat(analysis: InboxAnalysis, fyi_limit: int | None = None) -> str:
    """Overview of a scan: header, summary, then one numbered section per non-empty bucket."""
    limit = settings.fyi_preview_limit if fyi_limit is None else fyi_limit
    lines: list[str] = [
        "📧 **Inbox Intelligence Report**",
        f"Connected to: **{analysis.connected_account}** ({analysis.provider})",
        f"Last sync: {format_timestamp(analysis.analyzed_at)}",
        "",
        analysis.summary,
    ]

    sections = (
        ("urgent", "Urgent", analysis.urgent),
        ("needs_response", "Needs Response", analysis.needs_response),
        ("fyi", "FYI", analysis.fyi),
    )
    number = 0
    for priority, title, emails in sections:
        if not emails:
            continue
        lines.append("")
        lines.append(f"{PRIORITY_ICONS[priority]} **{title} ({len(emails)})**")
        shown = emails[:limit] if priority == "fyi" else emails
        for email in shown:
            number += 1
            lines.extend(_format_entry(number, email))
        if len(emails) > len(shown):
            lines.append(f"...and {len(emails) - len(shown)} more")

    lines.append("")
    lines.append("---")
    lines.append('💬 Say **"draft reply to #1"** to answer a specific email,')
    lines.append('or **"show emails"** to review them one by one.')
    return "\n".join(lines)


def format_single_email_for_chat(email: AnalyzedEmail, position: int, total: int) -> str:
    """One email with its triage data; *position* is 1-based."""
    lines: list[str] = [
        f"📧 **Email {position} of {total}** "
        f"{PRIORITY_ICONS[email.priority]} {PRIORITY_LABELS[email.priority]}",
        "",
        "---",
        "",
        f"**Subject:** {email.subject}",
        f"**From:** {email.from_}",
        f"**Received:** {format_received(email.date)}",
        "",
        f"**Summary:** {email.summary}",
        "",
    ]
    if email.suggested_action:
        lines.append(f"💡 **Suggested action:** {email.suggested_action}")
        lines.append("")
    lines.extend(
        [
            "---",
            "",
            "**📋 What would you like to do?**",
            "",
            '• **"Draft reply"** — I\'ll write a response for you',
            '• **"Next"** — Show the next email',
            '• **"Back"** — Show the previous email',
            '• **"Skip to urgent"** — Jump to urgent emails only',
            "",
        ]
    )
    if position < total:
        lines.append(f'📬 Say **"next"** to see email {position + 1} of {total}')
    else:
        lines.append('✅ This is the last email. Say **"back to summary"** to see the overview.')
    return "\n".join(lines)


def format_draft_for_chat(draft: EmailDraft, original_subject: str) -> str:
    lines = [
        "✉️ **Draft Reply Ready**",
        f"Replying to: *{original_subject}*",
        "",
        "---",
        "",
        f"**Subject:** {draft.subject}",
        "",
        draft.body,
        "",
        "---",
        "",
        "📝 **What would you like to do?**",
        '• Say "**send it**" to send this reply',
        '• Say "**make it shorter**" or "**more friendly**" to adjust',
        '• Say "**add...**" to include specific points',
        '• Say "**start over**" for a fresh draft',
    ]
    return "\n".join(lines)


def format_send_success(has_more: bool) -> str:
    follow_up = (
        'Say **"next"** to continue processing emails.'
        if has_more
        else "You've reached the end of your email queue!"
    )
    return f"✅ **Email sent!**\n\nYour reply has been sent successfully.\n\n{follow_up}"


def format_send_failure(error: str | None) -> str:
    return (
        f"❌ **Send failed:** {error or 'Unknown error'}\n\n"
        'Say **"send it"** to try again, or check your email connection in Settings.'
    )


def format_unexpected_error(error: Exception) -> str:
    message = str(error) or "Unknown error"
    return f"❌ An error occurred: {message}\n\nPlease repeat your last request."
