from typing import List, Optional


class FormRelayError(Exception):
    """Base class for everything the submission pipeline raises on purpose."""


class MethodNotAllowed(FormRelayError):
    def __init__(self, method: str):
        super().__init__(f"Method not allowed: {method}")
        self.method = method


class ParseError(FormRelayError):
    """Request body is malformed or cannot be decoded for its content type."""


class ValidationError(FormRelayError):
    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = list(errors)


class ConfigurationError(FormRelayError):
    """Mail transport settings are missing."""

    def __init__(self, missing: Optional[List[str]] = None):
        self.missing = list(missing or [])
        super().__init__("Missing required environment variables: " + ", ".join(self.missing))


class SendError(FormRelayError):
    """Mail transport refused the message or could not be reached."""
