from enum import Enum


class FailureKind(str, Enum):
    """Why a relay call did not produce a generated reply."""

    CONFIGURATION = "configuration"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    TIMEOUT = "timeout"
    UNAUTHORIZED = "unauthorized"
    MALFORMED_RESPONSE = "malformed_response"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value):
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


def kind_for_status(status_code):
    """Map an upstream HTTP status onto a FailureKind"""
    if status_code in (401, 403):
        return FailureKind.UNAUTHORIZED
    if status_code in (408, 504):
        return FailureKind.TIMEOUT
    if status_code == 429 or status_code >= 500:
        return FailureKind.UPSTREAM_UNAVAILABLE
    return FailureKind.UNKNOWN


class RelayError(Exception):
    """Base error raised while relaying a message to the model."""

    def __init__(self, message, kind=FailureKind.UNKNOWN):
        super().__init__(message)
        self.message = message
        self.kind = kind


class ConfigurationError(RelayError):
    def __init__(self, message):
        super().__init__(message, FailureKind.CONFIGURATION)


class GeminiAPIError(RelayError):
    """Raised when the Gemini API answers with a non-success status."""

    def __init__(self, status_code):
        super().__init__(f"Gemini API error: {status_code}", kind_for_status(status_code))
        self.status_code = status_code


class RelayInvocationError(Exception):
    """Raised by the chat side when invoking the relay endpoint fails."""

    def __init__(self, message, kind=FailureKind.UNKNOWN):
        super().__init__(message)
        self.message = message
        self.kind = kind
