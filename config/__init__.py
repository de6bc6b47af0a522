"""
Configuration Management Module
"""
from .settings import (
    Settings,
    ScraperSettings,
    LLMSettings,
    PromptSettings,
    FallbackSettings,
    get_settings,
    get_scraper_settings,
    get_llm_settings,
    get_prompt_settings,
    get_fallback_settings,
)

__all__ = [
    "Settings",
    "ScraperSettings",
    "LLMSettings",
    "PromptSettings",
    "FallbackSettings",
    "get_settings",
    "get_scraper_settings",
    "get_llm_settings",
    "get_prompt_settings",
    "get_fallback_settings",
]
