from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class APIError(HTTPException):
    def __init__(self, status_code: int, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(status_code=status_code, detail=message)
        self.code = code
        self.details = details


class NotFoundError(APIError):
    def __init__(self, message: str = "Not found", details: Optional[Dict[str, Any]] = None):
        super().__init__(status.HTTP_404_NOT_FOUND, "NOT_FOUND", message, details)


class ValidationError(APIError):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR", message, details)


def error_content(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {"error": {"code": code, "message": message, "details": details}}


# ---------- Itinerary generation pipeline ----------


class ProviderError(Exception):
    """Base class for failures of a single AI provider."""

    repair_attempts: int = 0


class ProviderTransportError(ProviderError):
    """Network failure, timeout or non-2xx status from the provider."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ExtractionError(ProviderError):
    """The response envelope did not contain the expected text path."""


class InvalidAiResponse(ProviderError):
    """The payload text could not be turned into an itinerary."""

    def __init__(self, message: str, last_error: Optional[str] = None, repair_attempts: int = 0):
        super().__init__(message)
        self.last_error = last_error
        self.repair_attempts = repair_attempts


class MissingFieldError(InvalidAiResponse):
    """Valid JSON that lacks a required key. Not retried by the repair loop."""

    def __init__(self, field: str):
        super().__init__(f"Required field '{field}' is missing from the AI response")
        self.field = field


class RequestCancelled(Exception):
    """Raised when the request's cancellation flag is set."""

    def __init__(self, stage: str = ""):
        super().__init__(f"Request cancelled before {stage}" if stage else "Request cancelled")
        self.stage = stage
