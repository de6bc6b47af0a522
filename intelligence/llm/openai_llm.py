"""
OpenAI LLM
GPT-4o family through the official SDK
"""
from typing import List, Optional
import logging

from .base import BaseLLM, ChatChoicesReply, Message


logger = logging.getLogger(__name__)


class OpenAILLM(BaseLLM):
    """
    OpenAI chat completions backend.

    Also the base for OpenAI-compatible providers (see DeepSeekLLM).
    """

    DEFAULT_BASE_URL: Optional[str] = None

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = 60.0,
        **kwargs,
    ):
        super().__init__(model, api_key, timeout, **kwargs)
        self.base_url = base_url or self.DEFAULT_BASE_URL
        self._async_client = None

    @property
    def provider(self) -> str:
        return "openai"

    def _get_async_client(self):
        if self._async_client is None:
            from openai import AsyncOpenAI
            # Retries are owned by the gateway's policy
            self._async_client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._async_client

    @staticmethod
    def _messages(prompt: str, system_prompt: Optional[str]) -> List[Message]:
        messages = []
        if system_prompt:
            messages.append(Message.system(system_prompt))
        messages.append(Message.user(prompt))
        return messages

    async def acomplete(
        self,
        prompt: str,
        temperature: float,
        max_tokens: int,
        system_prompt: Optional[str] = None,
    ) -> ChatChoicesReply:
        client = self._get_async_client()
        response = await client.chat.completions.create(
            model=self.model,
            messages=[m.to_dict() for m in self._messages(prompt, system_prompt)],
            temperature=temperature,
            max_tokens=max_tokens,
        )
        choices = list(response.choices or [])
        return ChatChoicesReply(
            contents=tuple(choice.message.content for choice in choices),
            model=str(getattr(response, "model", "") or self.model),
            finish_reason=choices[0].finish_reason if choices else None,
        )

    async def aclose(self) -> None:
        if self._async_client is not None:
            await self._close_client(self._async_client)
            self._async_client = None
