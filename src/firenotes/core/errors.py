"""Error taxonomy for Fire Notes.

Local edit operations never raise; only persistence, authentication and
export paths surface these errors.
"""


class FireNotesError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, detail: str | None = None):
        self.message = message
        self.detail = detail
        super().__init__(message)


class ValidationError(FireNotesError):
    """A required field is missing or malformed."""


class UnauthorizedError(FireNotesError):
    """Bearer token is missing, invalid or expired."""

    def __init__(
        self,
        message: str = "Not signed in",
        detail: str | None = "Please log in again.",
    ):
        super().__init__(message, detail)


class NotFoundError(FireNotesError):
    """Note does not exist or is not owned by the caller."""


class NetworkError(FireNotesError):
    """Transport failure or timeout talking to the notes API."""


class ServerError(FireNotesError):
    """Non-2xx response or malformed response body."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        detail: str | None = None,
    ):
        self.status_code = status_code
        super().__init__(message, detail)


class ExportError(FireNotesError):
    """Writing or sharing an exported file failed."""
