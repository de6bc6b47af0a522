"""
Custom Exceptions
"""
from typing import Optional


class PulseError(Exception):
    """Base error of the prediction pipeline"""

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(PulseError):
    """Bad or missing configuration"""
    pass


class InputValidationError(PulseError):
    """Caller supplied unusable parameters; raised before any scraping or model work"""
    pass


class ScraperError(PulseError):
    """Fetch level failure for a single source"""

    def __init__(self, message: str, source: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.source = source


class NetworkError(ScraperError):
    """Connection refused, DNS failure, non-2xx status or an unusable body"""
    pass


class FetchTimeoutError(ScraperError):
    """The fetch timeout elapsed before a response arrived"""
    pass


class ExtractionMismatch(PulseError):
    """No selector in a cascade produced an item that met the quality bar"""
    pass


class PromptError(PulseError):
    """Prompt could not be built within its bounds"""
    pass


class ModelError(PulseError):
    """Generative backend call failed"""

    def __init__(
        self,
        message: str,
        provider: str = None,
        transient: bool = False,
        cause: Optional[BaseException] = None,
        **kwargs,
    ):
        super().__init__(message, kwargs)
        self.provider = provider
        self.transient = transient
        self.cause = cause


class ResponseValidationError(PulseError):
    """Backend answered, but not in the required shape"""
    pass
