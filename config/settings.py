"""
Settings Configuration
Pydantic based configuration, loaded from environment variables and config/.env
"""
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class ScraperSettings(BaseSettings):
    """Scraping configuration"""
    request_timeout: float = Field(default=10.0, description="Per-source fetch timeout (seconds)")
    min_body_chars: int = Field(default=100, description="Responses shorter than this count as failures")
    max_containers: int = Field(default=10, description="Containers examined per page")
    max_items: int = Field(default=20, description="Overall cap on aggregated items")
    trending_top_k: int = Field(default=10, description="Number of trending terms kept")
    user_agents: List[str] = Field(
        default_factory=lambda: [
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
            "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:109.0) Gecko/20100101 Firefox/121.0",
        ],
        description="User agents rotated across requests",
    )

    class Config:
        env_prefix = "SCRAPER_"


class LLMSettings(BaseSettings):
    """Generative model configuration"""
    default_model: str = Field(default="deepseek-chat", description="Model id used when a task does not choose one")
    request_timeout: float = Field(default=30.0, description="Per-attempt timeout (seconds)")
    max_attempts: int = Field(default=3, description="Attempts for transient failures")
    retry_delay: float = Field(default=1.0, description="Fixed delay between attempts (seconds)")

    # API Keys
    deepseek_api_key: Optional[str] = Field(default=None, description="DeepSeek API Key")
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API Key")
    anthropic_api_key: Optional[str] = Field(default=None, description="Anthropic API Key")
    gemini_api_key: Optional[str] = Field(default=None, description="Google Gemini API Key")

    class Config:
        env_prefix = "LLM_"


class PromptSettings(BaseSettings):
    """Prompt size limits"""
    context_chars: int = Field(default=800, description="Characters of scraped context put in a prompt")
    max_prompt_chars: int = Field(default=6000, description="Hard bound on prompt length")

    class Config:
        env_prefix = "PROMPT_"


class FallbackSettings(BaseSettings):
    """Synthetic fallback configuration"""
    baseline: float = Field(default=50.0, description="Neutral vote share")
    sentiment_weight: float = Field(default=25.0, description="Vote share points per unit of sentiment")
    jitter: float = Field(default=10.0, description="Half-width of the random spread")
    clamp_min: float = Field(default=10.0, description="Lowest synthesized share")
    clamp_max: float = Field(default=90.0, description="Highest synthesized share")
    seed: Optional[int] = Field(default=None, description="Fixed seed (None = varied output)")

    class Config:
        env_prefix = "FALLBACK_"


class Settings(BaseSettings):
    """Top level settings, aggregates every group"""

    scraper: ScraperSettings = Field(default_factory=ScraperSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    prompt: PromptSettings = Field(default_factory=PromptSettings)
    fallback: FallbackSettings = Field(default_factory=FallbackSettings)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @classmethod
    def load_from_env_file(cls, env_path: Optional[Path] = None) -> "Settings":
        """Load settings, reading the given .env file first (config/.env by default)"""
        if env_path is None:
            env_path = Path(__file__).parent / ".env"

        if env_path.exists():
            from dotenv import load_dotenv
            load_dotenv(env_path)

        return cls(
            scraper=ScraperSettings(),
            llm=LLMSettings(),
            prompt=PromptSettings(),
            fallback=FallbackSettings(),
        )


@lru_cache()
def get_settings() -> Settings:
    """Process wide settings singleton"""
    return Settings.load_from_env_file()


def get_scraper_settings() -> ScraperSettings:
    return get_settings().scraper


def get_llm_settings() -> LLMSettings:
    return get_settings().llm


def get_prompt_settings() -> PromptSettings:
    return get_settings().prompt


def get_fallback_settings() -> FallbackSettings:
    return get_settings().fallback
