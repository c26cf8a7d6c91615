"""Tracing of edge-function calls and dialogue turns through Langfuse.

With LANGFUSE_PUBLIC_KEY set, ``observe`` is Langfuse's decorator and the
client is built from settings so traces carry the app environment. Without
it, ``observe`` passes calls straight through and ``flush_traces`` does
nothing.
"""

import asyncio
import logging
from collections.abc import Callable
from functools import wraps

from src.core.config import settings

logger = logging.getLogger(__name__)

_client = None

# Langfuse warns on every call when keys are missing
logging.getLogger("langfuse").setLevel(logging.ERROR)


def get_langfuse():
    """Return the shared Langfuse client, or None when tracing is off."""
    global _client
    if _client is None and settings.langfuse_public_key:
        try:
            from langfuse import Langfuse

            _client = Langfuse(
                public_key=settings.langfuse_public_key,
                secret_key=settings.langfuse_secret_key,
                host=settings.langfuse_host,
                environment=settings.app_env,
            )
        except Exception as e:
            logger.warning("Langfuse disabled, client init failed: %s", e)
    return _client


def flush_traces() -> None:
    """Send buffered spans; called on API shutdown."""
    client = get_langfuse()
    if client is not None:
        client.flush()


def _passthrough(name: str = "", **kwargs) -> Callable:
    def decorator(fn: Callable) -> Callable:
        if asyncio.iscoroutinefunction(fn):

            @wraps(fn)
            async def async_wrapper(*args, **kw):
                return await fn(*args, **kw)

            return async_wrapper

        @wraps(fn)
        def sync_wrapper(*args, **kw):
            return fn(*args, **kw)

        return sync_wrapper

    return decorator


if get_langfuse() is not None:
    from langfuse import observe
else:
    observe = _passthrough


__all__ = ["flush_traces", "get_langfuse", "observe"]
