"""
Google Gemini LLM
Gemini 2.0 Flash through google-generativeai
"""
from typing import Optional
import logging

from .base import BaseLLM, CandidatesReply


logger = logging.getLogger(__name__)


class GeminiLLM(BaseLLM):
    """
    Google Gemini backend

    Models:
    - gemini-2.0-flash (default)
    - gemini-1.5-pro
    """

    def __init__(
        self,
        model: str = "gemini-2.0-flash",
        api_key: Optional[str] = None,
        timeout: float = 60.0,
        **kwargs,
    ):
        super().__init__(model, api_key, timeout, **kwargs)

    @property
    def provider(self) -> str:
        return "gemini"

    async def acomplete(
        self,
        prompt: str,
        temperature: float,
        max_tokens: int,
        system_prompt: Optional[str] = None,
    ) -> CandidatesReply:
        import google.generativeai as genai

        genai.configure(api_key=self.api_key)

        model = genai.GenerativeModel(
            model_name=self.model,
            generation_config={
                "temperature": temperature,
                "max_output_tokens": max_tokens,
            },
            system_instruction=system_prompt,
        )

        response = await model.generate_content_async(
            prompt,
            request_options={"timeout": self.timeout},
        )

        candidates = []
        finish_reason = None
        for candidate in response.candidates or []:
            parts = getattr(candidate.content, "parts", None) or []
            candidates.append(tuple(str(getattr(part, "text", "") or "") for part in parts))
            if finish_reason is None and getattr(candidate, "finish_reason", None) is not None:
                finish_reason = getattr(candidate.finish_reason, "name", str(candidate.finish_reason))

        return CandidatesReply(
            candidates=tuple(candidates),
            model=self.model,
            finish_reason=finish_reason,
        )
