"""Exception hierarchy for the inbox assistant."""


class InboxAssistantError(Exception):
    """Base exception for all inbox assistant errors."""
    pass


class CollaboratorError(InboxAssistantError):
    """An edge function (fetch/analyze/draft/send) failed."""

    def __init__(self, function: str, message: str) -> None:
        super().__init__(message)
        self.function = function


class ConnectionCheckError(CollaboratorError):
    """The inbox-fetch call itself failed (not a disconnected account)."""
    pass


class ValidationError(InboxAssistantError):
    """Collaborator payload did not match the expected shape."""
    pass
