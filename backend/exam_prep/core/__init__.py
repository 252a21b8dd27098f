"""Core infrastructure module - config, DI container, protocols, exceptions."""

from exam_prep.core.config import AppConfig, LLMConfig, UploadConfig
from exam_prep.core.exceptions import (
    AppError,
    BackendError,
    ConfigurationError,
    ExtractionError,
    ValidationError,
)

__all__ = [
    "AppConfig",
    "LLMConfig",
    "UploadConfig",
    "AppError",
    "ValidationError",
    "ExtractionError",
    "ConfigurationError",
    "BackendError",
]
