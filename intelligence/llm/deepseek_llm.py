"""
DeepSeek LLM
deepseek-chat / deepseek-coder / deepseek-reasoner over the OpenAI-compatible API
"""
from typing import Optional

from .openai_llm import OpenAILLM


class DeepSeekLLM(OpenAILLM):
    """
    DeepSeek backend

    Models:
    - deepseek-chat (default)
    - deepseek-coder
    - deepseek-reasoner
    """

    DEFAULT_BASE_URL = "https://api.deepseek.com"

    def __init__(
        self,
        model: str = "deepseek-chat",
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = 120.0,
        **kwargs,
    ):
        super().__init__(model, api_key, base_url, timeout, **kwargs)

    @property
    def provider(self) -> str:
        return "deepseek"
