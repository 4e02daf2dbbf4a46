from typing import Optional


class PacketHubError(Exception):
    """Base class for failures raised by the services.

    ``category`` is what the HTTP layer reports in the ``error`` field and
    what it picks the status code from.
    """

    category = "error"

    def __init__(self, message: str = "Unexpected error", field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(message)


class ValidationError(PacketHubError):
    """Malformed or missing client input."""

    category = "validation_error"


class NotFoundError(PacketHubError):
    """Target is absent, unavailable, or not owned by the caller.

    Update and delete on messages use this for both "does not exist" and
    "not yours" so non-owners cannot discover message ids.
    """

    category = "not_found"


class UnknownError(PacketHubError):
    category = "unknown_error"


class NotOwnedError(NotFoundError):
    """No message matched both the id and the acting sender.

    Raised for a missing message and for someone else's message alike, so the
    two cases stay indistinguishable; reported as 403.
    """

    category = "no_permission"
