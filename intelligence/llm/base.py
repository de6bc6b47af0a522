"""
Base LLM
Backend abstraction and the closed set of raw reply shapes backends produce
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union
import inspect


class MessageRole(str, Enum):
    """Message role"""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass
class Message:
    """Chat message"""
    role: MessageRole
    content: str

    def to_dict(self) -> Dict[str, Any]:
        return {"role": self.role.value, "content": self.content}

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(role=MessageRole.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role=MessageRole.USER, content=content)


# ---------------------------------------------------------------------------
# Reply shapes. Every backend returns exactly one of these; the gateway
# turns them into plain text in one place.
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ChatChoicesReply:
    """OpenAI-compatible chat completion (OpenAI, DeepSeek): choices[i].message.content"""
    contents: Tuple[Optional[str], ...]
    model: str = ""
    finish_reason: Optional[str] = None


@dataclass(frozen=True)
class ContentBlocksReply:
    """Anthropic messages API: list of typed content blocks"""
    blocks: Tuple[Tuple[str, str], ...]  # (block type, text)
    model: str = ""
    stop_reason: Optional[str] = None


@dataclass(frozen=True)
class CandidatesReply:
    """Gemini: candidates[i].content.parts[j].text"""
    candidates: Tuple[Tuple[str, ...], ...]
    model: str = ""
    finish_reason: Optional[str] = None


@dataclass(frozen=True)
class PlainTextReply:
    """Backends that already hand back a string"""
    text: str
    model: str = ""


BackendReply = Union[ChatChoicesReply, ContentBlocksReply, CandidatesReply, PlainTextReply]


class BaseLLM(ABC):
    """
    Backend abstraction.

    Subclasses perform exactly one API call per `acomplete` and let SDK
    exceptions escape; classification and retries happen in the gateway.
    """

    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        timeout: float = 60.0,
        **kwargs,
    ):
        self.model = model
        self.api_key = api_key
        self.timeout = timeout
        self.extra_config = kwargs

    @property
    @abstractmethod
    def provider(self) -> str:
        """Provider name"""
        pass

    def is_configured(self) -> bool:
        """A backend without credentials is unusable"""
        return bool(self.api_key)

    @abstractmethod
    async def acomplete(
        self,
        prompt: str,
        temperature: float,
        max_tokens: int,
        system_prompt: Optional[str] = None,
    ) -> BackendReply:
        """
        Send one prompt.

        Args:
            prompt: user prompt
            temperature: sampling temperature
            max_tokens: completion budget
            system_prompt: optional system instruction

        Returns:
            The backend's raw reply shape
        """
        pass

    async def aclose(self) -> None:
        """Release SDK clients (default no-op)."""
        return None

    @staticmethod
    async def _close_client(client: Any) -> None:
        close_fn = getattr(client, "close", None)
        if callable(close_fn):
            maybe_awaitable = close_fn()
            if inspect.isawaitable(maybe_awaitable):
                await maybe_awaitable

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.model}, provider={self.provider})"
