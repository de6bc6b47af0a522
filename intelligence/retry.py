"""
Retry Policy
One bounded retry policy shared by every model call site
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, TypeVar

import anthropic
import httpx
import openai
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_fixed,
)

from utils.exceptions import ConfigurationError, ModelError


logger = logging.getLogger(__name__)

T = TypeVar("T")

RETRYABLE_STATUS = frozenset({408, 429})


def status_of(exc: BaseException) -> Optional[int]:
    """HTTP status carried by an SDK exception, if any."""
    for attr in ("status_code", "code"):
        value = getattr(exc, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    response = getattr(exc, "response", None)
    value = getattr(response, "status_code", None)
    return value if isinstance(value, int) else None


def is_transient(exc: BaseException) -> bool:
    """
    Classify a backend exception.

    Transient: timeouts, connection failures, 429 and 5xx.
    Everything else (authentication, other 4xx, malformed requests) is not.
    """
    if isinstance(exc, ModelError):
        return exc.transient
    if isinstance(exc, (asyncio.TimeoutError, TimeoutError, ConnectionError)):
        return True
    if isinstance(exc, (httpx.TimeoutException, httpx.TransportError)):
        return True
    if isinstance(exc, (openai.APIConnectionError, anthropic.APIConnectionError)):
        return True
    if isinstance(exc, (openai.AuthenticationError, anthropic.AuthenticationError)):
        return False

    status = status_of(exc)
    if status is None:
        return False
    return status in RETRYABLE_STATUS or status >= 500


@dataclass(frozen=True)
class RetryPolicy:
    """
    Fixed-delay bounded retry.

    Only exceptions accepted by `retryable` are retried; the last exception
    is re-raised once attempts are exhausted.
    """
    max_attempts: int = 3
    delay: float = 1.0
    retryable: Callable[[BaseException], bool] = is_transient

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ConfigurationError("max_attempts must be >= 1", {"max_attempts": self.max_attempts})
        if self.delay < 0:
            raise ConfigurationError("delay must be >= 0", {"delay": self.delay})

    @classmethod
    def from_settings(cls) -> "RetryPolicy":
        from config import get_llm_settings

        settings = get_llm_settings()
        return cls(max_attempts=settings.max_attempts, delay=settings.retry_delay)

    def _log_retry(self, retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            f"Attempt {retry_state.attempt_number}/{self.max_attempts} failed "
            f"({exc}); retrying in {self.delay:.1f}s"
        )

    def retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_fixed(self.delay),
            retry=retry_if_exception(self.retryable),
            before_sleep=self._log_retry,
            reraise=True,
        )

    async def call(self, fn: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """Run `fn(*args, **kwargs)` under this policy."""
        return await self.retrying()(fn, *args, **kwargs)
