"""Priority ordering over an InboxAnalysis.

Everything here is a projection of the three buckets; nothing is cached, so
the result always reflects the analysis passed in.
"""

from src.core.schemas.inbox import AnalyzedEmail, InboxAnalysis, Priority


def all_emails_in_order(analysis: InboxAnalysis | None) -> list[AnalyzedEmail]:
    """Urgent first, then needs-response, then FYI; bucket order preserved."""
    if analysis is None:
        return []
    return [*analysis.urgent, *analysis.needs_response, *analysis.fyi]


def total_emails(analysis: InboxAnalysis | None) -> int:
    return len(all_emails_in_order(analysis))


def get_email_by_number(analysis: InboxAnalysis | None, number: int) -> AnalyzedEmail | None:
    """Look up an email by its 1-based position in priority order."""
    emails = all_emails_in_order(analysis)
    if number < 1 or number > len(emails):
        return None
    return emails[number - 1]


def find_email_by_keyword(analysis: InboxAnalysis | None, keyword: str) -> AnalyzedEmail | None:
    """First email whose subject, summary or sender contains *keyword* (case-insensitive)."""
    lower = keyword.lower()
    for email in all_emails_in_order(analysis):
        if (
            lower in email.subject.lower()
            or lower in email.summary.lower()
            or lower in email.from_.lower()
        ):
            return email
    return None


def first_index_of_priority(analysis: InboxAnalysis | None, priority: Priority) -> int | None:
    for idx, email in enumerate(all_emails_in_order(analysis)):
        if email.priority == priority:
            return idx
    return None
