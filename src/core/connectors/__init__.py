"""Inbox collaborator connectors.

Usage::

    from src.core.connectors import SupabaseFunctionsConnector

    connector = SupabaseFunctionsConnector()
    if connector.is_configured:
        result = await connector.fetch()
"""

from src.core.connectors.base import InboxConnector
from src.core.connectors.supabase import SupabaseFunctionsConnector

__all__ = ["InboxConnector", "SupabaseFunctionsConnector"]
