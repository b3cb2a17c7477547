"""
Custom exceptions for the Grätzlmap backend.
Every exception carries the HTTP status it maps to when it reaches the API layer.
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Standardized error codes for the application."""

    # Lookup errors
    NOT_FOUND = "NOT_FOUND"
    ALREADY_EXISTS = "ALREADY_EXISTS"

    # Request errors
    MISSING_FIELD = "MISSING_FIELD"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_COORDINATES = "INVALID_COORDINATES"
    UPLOAD_FAILED = "UPLOAD_FAILED"
    UPLOAD_TOO_LARGE = "UPLOAD_TOO_LARGE"

    # Data errors
    GEODATA_LOAD_FAILED = "GEODATA_LOAD_FAILED"
    STORAGE_ERROR = "STORAGE_ERROR"

    # Generic errors
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class GraetzlmapException(Exception):
    """Base exception for the Grätzlmap backend."""

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


class NotFoundError(GraetzlmapException):
    """Raised when an id or slug lookup misses."""

    def __init__(self, resource: str, identifier: Any = None):
        details = {"resource": resource}
        if identifier is not None:
            details["id"] = identifier
        super().__init__(
            message=f"{resource} not found",
            error_code=ErrorCode.NOT_FOUND,
            details=details,
            status_code=404
        )


class MissingFieldError(GraetzlmapException):
    """Raised when a request body lacks required fields."""

    def __init__(self, message: str, fields: Optional[list] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.MISSING_FIELD,
            details={"fields": fields or []},
            status_code=400
        )


class AlreadyExistsError(GraetzlmapException):
    """Raised when adding a key that is already present."""

    def __init__(self, resource: str, key: str, existing: Optional[Dict[str, Any]] = None):
        details: Dict[str, Any] = {"key": key}
        if existing is not None:
            details[resource.lower()] = existing
        super().__init__(
            message=f"{resource} already exists",
            error_code=ErrorCode.ALREADY_EXISTS,
            details=details,
            status_code=409
        )


class InvalidCoordinateError(GraetzlmapException):
    """Raised when a coordinate is not a pair of numbers."""

    def __init__(self, value: Any):
        super().__init__(
            message=f"Invalid coordinate {value!r}: expected exactly two numbers",
            error_code=ErrorCode.INVALID_COORDINATES,
            details={"value": repr(value)},
            status_code=400
        )


class GeoDataLoadError(GraetzlmapException):
    """Raised when POI or neighborhood GeoJSON cannot be loaded or parsed."""

    def __init__(self, source: str, reason: str):
        super().__init__(
            message=f"Failed to load geodata from {source}: {reason}",
            error_code=ErrorCode.GEODATA_LOAD_FAILED,
            details={"source": source},
            status_code=503
        )


class StorageError(GraetzlmapException):
    """Raised when a JSON data file cannot be read or written."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            message=f"Storage failure on {path}: {reason}",
            error_code=ErrorCode.STORAGE_ERROR,
            details={"path": path},
            status_code=500
        )


class UploadError(GraetzlmapException):
    """Raised when an uploaded file is missing or rejected."""

    def __init__(self, message: str, status_code: int = 400, error_code: ErrorCode = ErrorCode.UPLOAD_FAILED):
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=status_code
        )


class UploadTooLargeError(UploadError):
    """Raised when an uploaded file exceeds the configured size."""

    def __init__(self, size_mb: float, max_size_mb: int):
        super().__init__(
            message=f"File size {size_mb:.1f}MB exceeds maximum allowed size of {max_size_mb}MB",
            status_code=413,
            error_code=ErrorCode.UPLOAD_TOO_LARGE
        )
        self.details = {"size_mb": size_mb, "max_size_mb": max_size_mb}
