"""
LLM Factory
Create the backend serving a ModelId from configuration
"""
from typing import Dict, Optional, Type
import logging

from models import ModelId

from .base import BaseLLM
from .openai_llm import OpenAILLM
from .anthropic_llm import AnthropicLLM
from .deepseek_llm import DeepSeekLLM
from .gemini_llm import GeminiLLM


logger = logging.getLogger(__name__)


BACKENDS: Dict[str, Type[BaseLLM]] = {
    "deepseek": DeepSeekLLM,
    "openai": OpenAILLM,
    "anthropic": AnthropicLLM,
    "gemini": GeminiLLM,
}


def resolve_model_id(value) -> ModelId:
    """Accept a ModelId or its string value."""
    if isinstance(value, ModelId):
        return value
    try:
        return ModelId(str(value).strip().lower())
    except ValueError:
        supported = ", ".join(m.value for m in ModelId)
        raise ValueError(f"Unsupported model '{value}'. Supported: {supported}")


def get_llm(
    model_id: Optional[ModelId] = None,
    api_key: Optional[str] = None,
    **kwargs,
) -> BaseLLM:
    """
    Build the backend for a model id.

    Reads the API key of the model's provider from LLMSettings unless one
    is passed explicitly. The returned backend may be unconfigured (no key);
    the gateway checks that before calling it.

    Example:
        llm = get_llm()                          # LLM_DEFAULT_MODEL
        llm = get_llm(ModelId.GPT_4O_MINI)
        llm = get_llm("claude-3-5-sonnet", api_key="sk-...")
    """
    from config import get_llm_settings

    settings = get_llm_settings()
    model_id = resolve_model_id(model_id or settings.default_model)
    provider = model_id.provider

    api_keys = {
        "openai": settings.openai_api_key,
        "anthropic": settings.anthropic_api_key,
        "deepseek": settings.deepseek_api_key,
        "gemini": settings.gemini_api_key,
    }

    backend_cls = BACKENDS[provider]
    kwargs.setdefault("timeout", settings.request_timeout)

    logger.debug(f"Creating {provider} backend for {model_id.value}")
    return backend_cls(
        model=model_id.api_model_name,
        api_key=api_key or api_keys.get(provider),
        **kwargs,
    )
