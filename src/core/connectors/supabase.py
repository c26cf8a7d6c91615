"""Supabase edge-function connector: inbox-fetch, inbox-analyze, draft-email-reply, send-email."""

import logging
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from src.core.config import settings
from src.core.exceptions import CollaboratorError, ConnectionCheckError, ValidationError
from src.core.observability import observe
from src.core.schemas.inbox import (
    DraftTone,
    EmailDraft,
    EmailMessage,
    FetchResult,
    InboxAnalysis,
    SendResult,
)

logger = logging.getLogger(__name__)

FETCH_FUNCTION = "inbox-fetch"
ANALYZE_FUNCTION = "inbox-analyze"
DRAFT_FUNCTION = "draft-email-reply"
SEND_FUNCTION = "send-email"


class SupabaseFunctionsConnector:
    """Thin async wrapper around the Supabase functions endpoint (no SDK dependency)."""

    name: str = "supabase"

    def __init__(
        self,
        base_url: str = "",
        access_token: str = "",
        anon_key: str = "",
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url or settings.functions_base_url
        self._token = access_token or settings.supabase_access_token
        self._anon_key = anon_key or settings.supabase_anon_key
        self._timeout = timeout if timeout is not None else settings.functions_timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def is_configured(self) -> bool:
        return bool(self._base_url and self._token)

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {"Authorization": f"Bearer {self._token}"}
            if self._anon_key:
                headers["apikey"] = self._anon_key
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=headers,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def _invoke(self, function: str, body: dict[str, Any] | None = None) -> dict[str, Any]:
        """POST *body* to a function and return the decoded JSON object."""
        client = await self._get_client()
        try:
            resp = await client.post(f"/{function}", json=body or {})
        except httpx.HTTPError as e:
            logger.warning("Edge function %s transport error: %s", function, e)
            raise CollaboratorError(function, f"Failed to reach {function}: {e}") from e

        try:
            data = resp.json()
        except ValueError:
            data = {}

        if resp.is_error:
            detail = data.get("error") if isinstance(data, dict) else None
            logger.warning("Edge function %s returned %s: %s", function, resp.status_code, detail)
            raise CollaboratorError(function, detail or f"{function} failed ({resp.status_code})")
        if not isinstance(data, dict):
            raise ValidationError(f"{function} returned a non-object body")
        return data

    # ------------------------------------------------------------------
    # Inbox
    # ------------------------------------------------------------------
    @observe(name="inbox_fetch")
    async def fetch(self) -> FetchResult:
        try:
            data = await self._invoke(FETCH_FUNCTION)
        except CollaboratorError as e:
            raise ConnectionCheckError(FETCH_FUNCTION, str(e)) from e
        try:
            return FetchResult.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(f"{FETCH_FUNCTION}: {e}") from e

    @observe(name="inbox_analyze")
    async def analyze(
        self,
        emails: list[EmailMessage],
        provider: str,
        connected_account: str,
    ) -> InboxAnalysis:
        data = await self._invoke(
            ANALYZE_FUNCTION,
            {
                "emails": [e.model_dump(by_alias=True) for e in emails],
                "provider": provider,
                "connectedAccount": connected_account,
            },
        )
        if "analysis" not in data:
            detail = data.get("error") or "Failed to analyze emails"
            raise CollaboratorError(ANALYZE_FUNCTION, detail)
        try:
            return InboxAnalysis.model_validate(data["analysis"])
        except PydanticValidationError as e:
            raise ValidationError(f"{ANALYZE_FUNCTION}: {e}") from e

    # ------------------------------------------------------------------
    # Drafting and sending
    # ------------------------------------------------------------------
    @observe(name="draft_email_reply")
    async def draft_reply(
        self,
        original_email: dict[str, Any],
        tone: DraftTone,
        instructions: str | None = None,
        user_context: dict[str, Any] | None = None,
    ) -> EmailDraft:
        body: dict[str, Any] = {"originalEmail": original_email, "tone": tone}
        if instructions:
            body["instructions"] = instructions
        if user_context:
            body["userContext"] = user_context
        data = await self._invoke(DRAFT_FUNCTION, body)
        if "draft" not in data:
            raise CollaboratorError(DRAFT_FUNCTION, data.get("error") or "Failed to draft reply")
        try:
            return EmailDraft.model_validate(data["draft"])
        except PydanticValidationError as e:
            raise ValidationError(f"{DRAFT_FUNCTION}: {e}") from e

    @observe(name="send_email")
    async def send_email(
        self,
        original_email_id: str,
        subject: str,
        body: str,
        to: str,
    ) -> SendResult:
        data = await self._invoke(
            SEND_FUNCTION,
            {
                "originalEmailId": original_email_id,
                "subject": subject,
                "body": body,
                "to": to,
            },
        )
        try:
            return SendResult.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(f"{SEND_FUNCTION}: {e}") from e

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None
