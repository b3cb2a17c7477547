"""
Core building blocks: exceptions, error handlers, logging and service wiring.
"""

from .exceptions import (
    ErrorCode,
    GraetzlmapException,
    NotFoundError,
    MissingFieldError,
    AlreadyExistsError,
    InvalidCoordinateError,
    GeoDataLoadError,
    StorageError,
    UploadError,
    UploadTooLargeError,
)
from .logging import JsonFormatter, configure_logging

__all__ = [
    "ErrorCode",
    "GraetzlmapException",
    "NotFoundError",
    "MissingFieldError",
    "AlreadyExistsError",
    "InvalidCoordinateError",
    "GeoDataLoadError",
    "StorageError",
    "UploadError",
    "UploadTooLargeError",
    "JsonFormatter",
    "configure_logging",
]
