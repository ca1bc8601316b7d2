"""
Shared error handling for the commissioning registry client.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel, Field

from opentelemetry import trace


class ErrorResponse(BaseModel):
    """Standard error response format."""

    trace_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class RegistryClientException(Exception):
    """Base exception for the registry client."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        trace_id = None
        current_span = trace.get_current_span()
        if current_span and current_span.is_recording():
            span_context = current_span.get_span_context()
            if span_context.trace_id != 0:
                trace_id = f"{span_context.trace_id:032x}"

        return ErrorResponse(
            trace_id=trace_id,
            code=self.code,
            message=self.message,
            details=self.details
        )


class InvalidConfigurationError(RegistryClientException):
    """Configuration rejected at construction time."""

    def __init__(self, message: str = "Invalid configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("INVALID_CONFIGURATION", message, details)


class OperationAbortedError(RegistryClientException):
    """Caller was cancelled while waiting for admission."""

    def __init__(self, message: str = "Operation aborted", details: Optional[Dict[str, Any]] = None):
        super().__init__("OPERATION_ABORTED", message, details)


class TransportError(RegistryClientException):
    """Network failure or unreadable reply from the registry."""

    def __init__(self, message: str = "Transport error", details: Optional[Dict[str, Any]] = None):
        super().__init__("TRANSPORT_ERROR", message, details)


class SubmissionRejectedError(RegistryClientException):
    """Registry answered without a created document id."""

    def __init__(self, reason: str = "", details: Optional[Dict[str, Any]] = None):
        self.reason = reason
        super().__init__("SUBMISSION_REJECTED", f"Registry rejected document: {reason}", details)


class EncodingError(RegistryClientException):
    """Value could not be serialized or base64-decoded."""

    def __init__(self, message: str = "Encoding failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("ENCODING_ERROR", message, details)
