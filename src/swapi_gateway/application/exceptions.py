"""Application-level exceptions.

These are business-logic errors, not HTTP errors. The presentation layer
(the FastAPI routes) translates them into appropriate HTTP responses.
"""


class GatewayError(Exception):
    """Base class for all gateway errors."""


class UpstreamUnavailableError(GatewayError):
    """Raised when the catalog or the chat-completion service cannot be reached."""


class NotFoundError(GatewayError, LookupError):
    """Raised when a lookup by id yields no record."""


class InvalidRequestError(GatewayError, ValueError):
    """Raised for caller mistakes: bad page/limit, non-positive budget, ..."""


class EmptyMessageError(InvalidRequestError):
    """Raised when the caller sends a blank chat message."""


class ContextBudgetExceededError(InvalidRequestError):
    """Raised when the new user message alone does not fit the context budget."""
