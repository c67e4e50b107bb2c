"""Exception taxonomy for the kitchen core."""

from typing import Any


class KitchenError(Exception):
    """Base exception for kitchly errors."""


class ValidationError(KitchenError):
    """Raised when a recipe, ingredient or line item cannot be salvaged."""

    def __init__(self, message: str, index: int | None = None):
        super().__init__(message)
        self.index = index


class GenerationError(KitchenError):
    """Base exception for structured generation failures."""

    user_message = "I couldn't put that together. Please try rephrasing your request."


class ParseError(GenerationError):
    """Raised when the inference output is not a JSON object."""

    def __init__(self, message: str, raw: str | None = None):
        super().__init__(message)
        self.raw = raw


class IncompleteResultError(GenerationError):
    """Raised when the inference output lacks required fields."""

    def __init__(self, message: str, missing: list[str] | None = None):
        super().__init__(message)
        self.missing = missing or []


class NetworkError(KitchenError):
    """Raised when the grocery API is unreachable or rejects a request."""

    def __init__(self, message: str, status_code: int | None = None, response: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class OrderAPIError(NetworkError):
    """Raised on a non-success status or a malformed success payload."""


class OrderTimeoutError(NetworkError, TimeoutError):
    """Raised when the grocery API does not answer within the timeout."""


class ConfigurationError(KitchenError):
    """Raised when a required credential or setting is missing."""


class SessionStateError(KitchenError):
    """Raised when a cooking session cannot be started or is unusable."""
