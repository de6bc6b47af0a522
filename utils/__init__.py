"""
Utils Module
"""
from .logger import setup_logger, get_logger, configure_package_logging
from .exceptions import (
    PulseError,
    ConfigurationError,
    InputValidationError,
    ScraperError,
    NetworkError,
    FetchTimeoutError,
    ExtractionMismatch,
    PromptError,
    ModelError,
    ResponseValidationError,
)

__all__ = [
    "setup_logger",
    "get_logger",
    "configure_package_logging",
    "PulseError",
    "ConfigurationError",
    "InputValidationError",
    "ScraperError",
    "NetworkError",
    "FetchTimeoutError",
    "ExtractionMismatch",
    "PromptError",
    "ModelError",
    "ResponseValidationError",
]
