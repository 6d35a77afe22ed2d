class LMSError(Exception):
    """Base error carrying the HTTP status the API reports for it."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthenticationMissing(LMSError):
    status_code = 401
    default_message = "Not authenticated"


class AuthorizationDenied(LMSError):
    status_code = 403
    default_message = "Access denied"


class ValidationFailure(LMSError):
    status_code = 400
    default_message = "Invalid data"


class NotFound(LMSError):
    status_code = 404
    default_message = "Not found"


class Conflict(LMSError):
    status_code = 409
    default_message = "Conflict"
