"""
Prompt Builder
Assemble the model prompt from aggregated context, a task and its output contract
"""
import logging
from typing import Any, Dict, Optional

from models import AggregatedContext
from utils.exceptions import PromptError

from .schema import OutputSchema


logger = logging.getLogger(__name__)

NO_DATA_NOTE = (
    "No live data is available from Kenyan sources right now. "
    "Base the answer on general knowledge of Kenyan politics."
)

JSON_ONLY_INSTRUCTION = (
    "Respond with valid JSON only, exactly matching this structure. "
    "Do not add commentary or markdown."
)


class PromptBuilder:
    """
    Deterministic prompt assembly.

    Sections, in order: live context excerpt, trending terms, the task
    instruction, and the output contract.
    """

    def __init__(
        self,
        context_chars: Optional[int] = None,
        max_prompt_chars: Optional[int] = None,
        max_trending: int = 5,
    ):
        if context_chars is None or max_prompt_chars is None:
            from config import get_prompt_settings
            settings = get_prompt_settings()
            context_chars = settings.context_chars if context_chars is None else context_chars
            max_prompt_chars = settings.max_prompt_chars if max_prompt_chars is None else max_prompt_chars

        self.context_chars = context_chars
        self.max_prompt_chars = max_prompt_chars
        self.max_trending = max_trending

    @staticmethod
    def render_task(task_template: str, params: Optional[Dict[str, Any]] = None) -> str:
        try:
            return task_template.format(**(params or {}))
        except KeyError as e:
            raise PromptError(f"Task template references missing parameter {e}", {"template": task_template[:80]})
        except (IndexError, ValueError) as e:
            raise PromptError(f"Malformed task template: {e}")

    def context_section(self, context: Optional[AggregatedContext]) -> str:
        if context is None or context.is_empty:
            return f"REAL-TIME DATA FROM KENYAN SOURCES:\n{NO_DATA_NOTE}"

        joined = "\n".join(f"{item.source}: {item.content}" for item in context.items)
        return f"REAL-TIME DATA FROM KENYAN SOURCES:\n{joined[:self.context_chars]}"

    def trending_section(self, context: Optional[AggregatedContext]) -> str:
        terms = context.trending_terms[:self.max_trending] if context else []
        if not terms:
            return "TRENDING TOPICS: none detected"
        return "TRENDING TOPICS: " + ", ".join(f"{t.term} ({t.count})" for t in terms)

    def build(
        self,
        context: Optional[AggregatedContext],
        task_template: str,
        output_schema: OutputSchema,
        params: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Build the full prompt.

        The task and contract are never cut; the context excerpt is
        shortened when the whole prompt would exceed `max_prompt_chars`.

        Raises:
            PromptError: missing template parameter, or task plus contract
                alone longer than `max_prompt_chars`
        """
        task_text = self.render_task(task_template, params).strip()
        contract = f"{JSON_ONLY_INSTRUCTION}\n{output_schema.describe()}"
        fixed = f"{task_text}\n\n{contract}"

        if len(fixed) > self.max_prompt_chars:
            raise PromptError(
                f"Task text is {len(fixed)} chars, above the {self.max_prompt_chars} char bound",
                {"schema": output_schema.name},
            )

        header = "\n\n".join([self.context_section(context), self.trending_section(context)])
        budget = self.max_prompt_chars - len(fixed) - 2
        if len(header) > budget:
            logger.debug(f"Context trimmed from {len(header)} to {budget} chars")
            header = header[:max(0, budget)].rstrip()

        prompt = f"{header}\n\n{fixed}" if header else fixed
        logger.debug(f"Built {output_schema.name} prompt ({len(prompt)} chars)")
        return prompt
