"""
Model Gateway
Send a ModelRequest to its backend and hand back plain text
"""
import asyncio
import logging
from typing import Callable, Dict, Optional

from models import ModelFailure, ModelId, ModelRequest, ModelResponse, ModelText
from utils.exceptions import ModelError

from .llm import (
    BackendReply,
    BaseLLM,
    CandidatesReply,
    ChatChoicesReply,
    ContentBlocksReply,
    PlainTextReply,
    get_llm,
)
from .retry import RetryPolicy, is_transient


logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert in Kenyan politics and elections. "
    "Answer with a single JSON object and nothing else."
)


def normalize_reply(reply: BackendReply) -> str:
    """
    Collapse any backend reply shape into one string.

    Empty when the backend produced no text.
    """
    if isinstance(reply, ChatChoicesReply):
        for content in reply.contents:
            if content and content.strip():
                return content.strip()
        return ""
    if isinstance(reply, ContentBlocksReply):
        texts = [text for block_type, text in reply.blocks if block_type == "text" and text]
        return "".join(texts).strip()
    if isinstance(reply, CandidatesReply):
        for parts in reply.candidates:
            text = "".join(parts).strip()
            if text:
                return text
        return ""
    if isinstance(reply, PlainTextReply):
        return (reply.text or "").strip()
    raise TypeError(f"Unknown reply shape: {type(reply).__name__}")


class ModelGateway:
    """
    Single entry point for generative calls.

    Backends are built lazily per ModelId through `backend_factory`
    (defaults to the configured factory) and cached for the gateway's
    lifetime. Tests inject fakes through `backends`.
    """

    def __init__(
        self,
        retry_policy: Optional[RetryPolicy] = None,
        request_timeout: Optional[float] = None,
        backends: Optional[Dict[ModelId, BaseLLM]] = None,
        backend_factory: Optional[Callable[[ModelId], BaseLLM]] = None,
        system_prompt: str = SYSTEM_PROMPT,
    ):
        if request_timeout is None:
            from config import get_llm_settings
            request_timeout = get_llm_settings().request_timeout

        self.retry_policy = retry_policy or RetryPolicy.from_settings()
        self.request_timeout = request_timeout
        self.system_prompt = system_prompt
        self._backends: Dict[ModelId, BaseLLM] = dict(backends or {})
        self._backend_factory = backend_factory or get_llm

    def backend_for(self, model_id: ModelId) -> BaseLLM:
        backend = self._backends.get(model_id)
        if backend is None:
            backend = self._backend_factory(model_id)
            self._backends[model_id] = backend
        return backend

    async def _attempt(self, backend: BaseLLM, request: ModelRequest) -> str:
        try:
            reply = await asyncio.wait_for(
                backend.acomplete(
                    request.prompt,
                    temperature=request.config.temperature,
                    max_tokens=request.config.max_tokens,
                    system_prompt=self.system_prompt,
                ),
                timeout=self.request_timeout,
            )
        except asyncio.CancelledError:
            raise
        except ModelError:
            raise
        except asyncio.TimeoutError as e:
            raise ModelError(
                f"{backend.provider} timed out after {self.request_timeout}s",
                provider=backend.provider,
                transient=True,
                cause=e,
            )
        except Exception as e:
            raise ModelError(
                f"{backend.provider} call failed: {e}",
                provider=backend.provider,
                transient=is_transient(e),
                cause=e,
            )

        text = normalize_reply(reply)
        if not text:
            raise ModelError(
                f"{backend.provider} returned an empty completion",
                provider=backend.provider,
                transient=False,
            )
        return text

    async def generate(self, request: ModelRequest) -> str:
        """
        Run one completion.

        Raises:
            ModelError: missing credentials, non-retryable failure, or
                retries exhausted
        """
        backend = self.backend_for(request.model_id)
        if not backend.is_configured():
            raise ModelError(
                f"No API key configured for {backend.provider} ({request.model_id.value})",
                provider=backend.provider,
                transient=False,
            )

        logger.info(f"Calling {request.model_id.value} ({len(request.prompt)} chars)")
        text = await self.retry_policy.call(self._attempt, backend, request)
        logger.info(f"{request.model_id.value} answered with {len(text)} chars")
        return text

    async def respond(self, request: ModelRequest) -> ModelResponse:
        """Like `generate`, but returns the failure as a value."""
        try:
            return ModelText(raw_text=await self.generate(request))
        except ModelError as e:
            return ModelFailure(error=e.message, provider=e.provider, transient=e.transient)

    async def aclose(self) -> None:
        for backend in self._backends.values():
            await backend.aclose()
        self._backends.clear()
