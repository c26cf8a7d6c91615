"""Inbox assistant — FastAPI entrypoint (chat turn + context + health check)."""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from src.core.config import settings
from src.core.connectors.supabase import SupabaseFunctionsConnector
from src.core.observability import flush_traces
from src.orchestrators.email.assistant import NOT_SCANNED_PROMPT_CONTEXT, EmailAssistant

logging.basicConfig(level=getattr(logging, settings.log_level))
logger = logging.getLogger(__name__)

connector = SupabaseFunctionsConnector()

# One assistant per chat session; idle sessions expire after settings.session_idle_ttl
_assistants: dict[str, EmailAssistant] = {}
_last_used: dict[str, float] = {}
_clock = time.monotonic


def _evict_idle(now: float) -> None:
    for session_id, last_used in list(_last_used.items()):
        if now - last_used < settings.session_idle_ttl:
            continue
        if _assistants[session_id].is_processing:
            continue
        del _assistants[session_id]
        del _last_used[session_id]
        logger.info("Expired idle email session %s", session_id)


def find_assistant(session_id: str) -> EmailAssistant | None:
    """Look up a live session without creating one."""
    now = _clock()
    _evict_idle(now)
    assistant = _assistants.get(session_id)
    if assistant is not None:
        _last_used[session_id] = now
    return assistant


def get_assistant(session_id: str, user_name: str | None = None) -> EmailAssistant:
    assistant = find_assistant(session_id)
    if assistant is None:
        assistant = EmailAssistant(connector, user_name=user_name)
        _assistants[session_id] = assistant
        _last_used[session_id] = _clock()
        logger.info("Started email session %s", session_id)
    elif user_name and user_name != assistant.user_name:
        assistant.user_name = user_name
    return assistant


class ChatRequest(BaseModel):
    session_id: str = Field(min_length=1)
    message: str
    user_name: str | None = None


class NoticeItem(BaseModel):
    level: str
    text: str


class ChatResponse(BaseModel):
    handled: bool
    response: str | None = None
    notices: list[NoticeItem] = Field(default_factory=list)


class EmailContextResponse(BaseModel):
    has_analysis: bool
    total_emails: int
    current_email_index: int
    has_draft: bool
    is_processing: bool
    prompt_context: str


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not connector.is_configured:
        logger.warning("Supabase functions not configured; inbox actions will fail")
    yield
    await connector.close()
    flush_traces()


app = FastAPI(title="Inbox Assistant", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.post("/chat", response_model=ChatResponse)
async def chat(body: ChatRequest) -> ChatResponse:
    """Run one chat turn. ``handled=False`` tells the UI to use its general chat."""
    assistant = get_assistant(body.session_id, body.user_name)
    response = await assistant.handle(body.message)
    notices = [NoticeItem(level=n.level, text=n.text) for n in assistant.notices.drain()]
    return ChatResponse(handled=response is not None, response=response, notices=notices)


@app.get("/email/context", response_model=EmailContextResponse)
async def email_context(session_id: str = Query(min_length=1)) -> EmailContextResponse:
    assistant = find_assistant(session_id)
    if assistant is None:
        return EmailContextResponse(
            has_analysis=False,
            total_emails=0,
            current_email_index=1,
            has_draft=False,
            is_processing=False,
            prompt_context=NOT_SCANNED_PROMPT_CONTEXT,
        )
    ctx = assistant.get_email_context()
    return EmailContextResponse(
        has_analysis=ctx.has_analysis,
        total_emails=ctx.total_emails,
        current_email_index=ctx.current_email_index,
        has_draft=ctx.current_draft is not None,
        is_processing=ctx.is_processing,
        prompt_context=assistant.build_email_context_for_prompt(),
    )
