"""Email dialogue executor — LangGraph StateGraph.

START routes on the parsed action type to exactly one action node, which
ends the run. The inbox store travels in the run config; cursor and draft
travel in the graph state and come back as a fresh EmailSession.
"""

import logging

from langgraph.graph import END, START, StateGraph

from src.core.email_intent import EmailAction
from src.core.formatting import format_unexpected_error
from src.core.inbox_store import InboxAnalysisStore
from src.core.observability import observe
from src.orchestrators.email.nodes import ACTION_NODES, route_email_action
from src.orchestrators.email.state import ActionOutcome, EmailSession, EmailState

logger = logging.getLogger(__name__)


def build_email_graph() -> StateGraph:
    """Build the email dialogue graph."""
    graph = StateGraph(EmailState)

    for action_type, node in ACTION_NODES.items():
        graph.add_node(str(action_type), node)
        graph.add_edge(str(action_type), END)

    graph.add_conditional_edges(
        START,
        route_email_action,
        {str(action_type): str(action_type) for action_type in ACTION_NODES},
    )
    return graph


# Compiled graph (singleton)
_email_graph = build_email_graph().compile()


class EmailDialogueExecutor:
    """Runs one EmailAction against a session and returns the next session."""

    def __init__(self, store: InboxAnalysisStore, user_name: str | None = None):
        self._store = store
        self.user_name = user_name

    @observe(name="email_action")
    async def execute(self, action: EmailAction, session: EmailSession) -> ActionOutcome:
        initial_state: EmailState = {
            "action": action,
            "user_name": self.user_name,
            "current_email_index": session.current_email_index,
            "current_draft": session.current_draft,
            "last_draft_email": session.last_draft_email,
            "response_text": "",
        }
        try:
            result = await _email_graph.ainvoke(
                initial_state, config={"configurable": {"store": self._store}}
            )
        except Exception as e:
            logger.exception("Email action %s failed", action.type)
            return ActionOutcome(response_text=format_unexpected_error(e), session=session)

        return ActionOutcome(
            response_text=result.get("response_text", ""),
            session=EmailSession(
                current_email_index=result.get(
                    "current_email_index", session.current_email_index
                ),
                current_draft=result.get("current_draft"),
                last_draft_email=result.get("last_draft_email"),
            ),
        )
