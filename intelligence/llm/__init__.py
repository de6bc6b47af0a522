"""
LLM Module
Provider backends and their reply shapes
"""
from .base import (
    BackendReply,
    BaseLLM,
    CandidatesReply,
    ChatChoicesReply,
    ContentBlocksReply,
    Message,
    MessageRole,
    PlainTextReply,
)
from .openai_llm import OpenAILLM
from .anthropic_llm import AnthropicLLM
from .deepseek_llm import DeepSeekLLM
from .gemini_llm import GeminiLLM
from .factory import BACKENDS, get_llm, resolve_model_id

__all__ = [
    "BackendReply",
    "BaseLLM",
    "CandidatesReply",
    "ChatChoicesReply",
    "ContentBlocksReply",
    "Message",
    "MessageRole",
    "PlainTextReply",
    "OpenAILLM",
    "AnthropicLLM",
    "DeepSeekLLM",
    "GeminiLLM",
    "BACKENDS",
    "get_llm",
    "resolve_model_id",
]
