"""Exceptions raised by the Kaggle API layer."""

from typing import Optional


class KaggleError(Exception):
    """Base exception for Kaggle operations.

    Raised directly for failures that fit no narrower kind.
    """
    pass


class KaggleAuthError(KaggleError):
    """Credential probe rejected by the Kaggle API."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Authentication failed: {detail}")


class KaggleApiError(KaggleError):
    """Non-2xx response from the Kaggle API."""

    def __init__(self, code: str, message: str, status_code: Optional[int] = None):
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(f"API error: {code}: {message}")


class KaggleHttpError(KaggleError):
    """Network or connection level failure."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"HTTP error: {detail}")


class KaggleJsonError(KaggleError):
    """Malformed JSON payload."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"JSON error: {detail}")


class KaggleIOError(KaggleError):
    """Filesystem failure while reading or writing credentials."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"IO error: {detail}")


class KaggleInvalidParameterError(KaggleError):
    """Invalid input rejected before reaching the API."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Invalid parameter: {detail}")


class KaggleNotAuthenticatedError(KaggleError):
    """No stored credentials are available."""

    def __init__(self):
        super().__init__("Not authenticated")


class InvalidCredentialsFileError(KaggleError):
    """kaggle.json exists but is not a valid credentials document."""

    def __init__(self, detail: str = "Invalid kaggle.json format"):
        super().__init__(detail)
