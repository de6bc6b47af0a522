"""
Anthropic LLM
Claude models through the messages API
"""
from typing import Optional
import logging

from .base import BaseLLM, ContentBlocksReply


logger = logging.getLogger(__name__)


class AnthropicLLM(BaseLLM):
    """Anthropic Claude backend"""

    def __init__(
        self,
        model: str = "claude-3-5-sonnet-20241022",
        api_key: Optional[str] = None,
        timeout: float = 60.0,
        **kwargs,
    ):
        super().__init__(model, api_key, timeout, **kwargs)
        self._async_client = None

    @property
    def provider(self) -> str:
        return "anthropic"

    def _get_async_client(self):
        if self._async_client is None:
            from anthropic import AsyncAnthropic
            self._async_client = AsyncAnthropic(
                api_key=self.api_key,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._async_client

    async def acomplete(
        self,
        prompt: str,
        temperature: float,
        max_tokens: int,
        system_prompt: Optional[str] = None,
    ) -> ContentBlocksReply:
        client = self._get_async_client()

        request_params = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if system_prompt:
            request_params["system"] = system_prompt

        response = await client.messages.create(**request_params)

        blocks = tuple(
            (str(block.type), str(getattr(block, "text", "") or ""))
            for block in response.content
        )
        return ContentBlocksReply(
            blocks=blocks,
            model=str(getattr(response, "model", "") or self.model),
            stop_reason=getattr(response, "stop_reason", None),
        )

    async def aclose(self) -> None:
        if self._async_client is not None:
            await self._close_client(self._async_client)
            self._async_client = None
