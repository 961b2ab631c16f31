class FormValidationError(Exception):
    """Raised when a form or response fails a local check before any network call."""

    def __init__(self, message: str, missing: list[str] | None = None):
        super().__init__(message)
        self.missing = missing or []


class BuilderError(ValueError):
    """Raised when a builder operation does not fit the question it targets."""


class SessionNotFoundError(LookupError):
    """Raised when a draft or response session id is unknown or already closed."""


class NetworkError(Exception):
    """Raised when a call to the form storage API fails."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class UploadError(NetworkError):
    """Raised when an image upload fails."""
