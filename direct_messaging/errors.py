"""Domain errors raised by the messaging services.

Routers map these onto HTTP status codes; services never raise
``HTTPException`` themselves.
"""


class MessagingError(Exception):
    """Base class for all messaging failures."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class InvalidRequestError(MessagingError, ValueError):
    """The request violates a validation rule (self-chat, empty message, bad file)."""


class ForbiddenError(MessagingError):
    """The caller has no membership row for the target conversation."""

    def __init__(self, detail: str = "Not allowed"):
        super().__init__(detail)


class NotFoundError(MessagingError):
    """A referenced conversation, message or attachment does not exist."""


class StorageConflictError(MessagingError):
    """A uniqueness race could not be resolved by re-fetching the winner."""


class UpstreamIOError(MessagingError):
    """Reading the uploaded byte stream failed."""
