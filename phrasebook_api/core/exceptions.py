"""
Custom exceptions for the phrasebook backend.

The merge core never raises; everything here originates at a boundary
(request validation, the language model, image uploads or the phrase store).
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Standardized error codes for the application."""

    # Request validation errors
    INVALID_SYNC_KEY = "INVALID_SYNC_KEY"
    MISSING_TEXT = "MISSING_TEXT"
    TOO_MANY_PHRASES = "TOO_MANY_PHRASES"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Image errors
    INVALID_IMAGE_FORMAT = "INVALID_IMAGE_FORMAT"
    IMAGE_TOO_LARGE = "IMAGE_TOO_LARGE"

    # Language model errors
    TRANSLATION_FAILED = "TRANSLATION_FAILED"
    TRANSLATOR_NOT_CONFIGURED = "TRANSLATOR_NOT_CONFIGURED"

    # Storage errors
    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"

    # Generic errors
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    PROCESSING_TIMEOUT = "PROCESSING_TIMEOUT"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class PhrasebookException(Exception):
    """Base exception for the phrasebook backend."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code


class InvalidSyncKeyError(PhrasebookException):
    """Raised when a sync key is missing, not a string, or too short."""

    def __init__(self, min_length: int = 10):
        super().__init__(
            message="Missing/invalid syncKey",
            error_code=ErrorCode.INVALID_SYNC_KEY,
            details={"min_length": min_length},
            status_code=400
        )


class TooManyPhrasesError(PhrasebookException):
    """Raised when a push carries more phrases than allowed."""

    def __init__(self, count: int, limit: int):
        super().__init__(
            message=f"Push contains {count} phrases, the limit is {limit}",
            error_code=ErrorCode.TOO_MANY_PHRASES,
            details={"count": count, "limit": limit},
            status_code=413
        )


class MissingTextError(PhrasebookException):
    """Raised when a translation request has no text."""

    def __init__(self):
        super().__init__(
            message="Missing text",
            error_code=ErrorCode.MISSING_TEXT,
            status_code=400
        )


class ImageValidationError(PhrasebookException):
    """Raised when an uploaded image is missing or unreadable."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.INVALID_IMAGE_FORMAT,
            details=details,
            status_code=400
        )


class ImageTooLargeError(PhrasebookException):
    """Raised when uploaded image exceeds size limits."""

    def __init__(self, size_mb: float, max_size_mb: int):
        super().__init__(
            message=f"Image size {size_mb:.1f}MB exceeds maximum allowed size of {max_size_mb}MB",
            error_code=ErrorCode.IMAGE_TOO_LARGE,
            details={"size_mb": round(size_mb, 2), "max_size_mb": max_size_mb},
            status_code=413
        )


class TranslationError(PhrasebookException):
    """Raised when the language model call fails or returns unusable output."""

    def __init__(self, message: str = "Translate failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.TRANSLATION_FAILED,
            details=details,
            status_code=502
        )


class TranslatorNotConfiguredError(PhrasebookException):
    """Raised when no language model API key is configured."""

    def __init__(self):
        super().__init__(
            message="OPENAI_API_KEY is missing on the server",
            error_code=ErrorCode.TRANSLATOR_NOT_CONFIGURED,
            status_code=500
        )


class StorageUnavailableError(PhrasebookException):
    """Raised when the phrase store cannot be read or written."""

    def __init__(self, operation: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"Phrase storage unavailable during {operation}",
            error_code=ErrorCode.STORAGE_UNAVAILABLE,
            details=details or {"operation": operation},
            status_code=503
        )
