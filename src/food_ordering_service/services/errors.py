"""Error taxonomy shared by services, repositories and the HTTP layer."""


class OrderingError(Exception):
    """Base class for expected service failures."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidRequestError(OrderingError):
    """Malformed or missing request data."""

    status_code = 400


class UnauthorizedError(OrderingError):
    """Bad credentials or a missing/invalid bearer token."""

    status_code = 401


class NotFoundError(OrderingError):
    """Referenced entity does not exist."""

    status_code = 404


class ConflictError(OrderingError):
    """Uniqueness violation, e.g. an email address already registered."""

    # A taken email is reported as 400, not 409
    status_code = 400


class InternalFailureError(OrderingError):
    """Unexpected failure, surfaced to clients without details."""

    status_code = 500


class PersistenceError(InternalFailureError):
    """Unexpected DynamoDB error."""
