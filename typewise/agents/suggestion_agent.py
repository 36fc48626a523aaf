"""Suggestion Agent — produces example form values for onboarding."""

from __future__ import annotations

import logging

from langchain_openai import ChatOpenAI
from langchain_core.messages import HumanMessage

from typewise.config import get_settings
from typewise.agents.output_parser import GenerationError, validate_output
from typewise.models.response_models import SuggestionResult
from typewise.prompts.suggestion_prompt import SUGGESTION_MAX_OUTPUT_TOKENS, SUGGESTION_PROMPT

logger = logging.getLogger(__name__)


class SuggestionAgent:
    """Stateless agent that suggests a goal, key points and tone."""

    def __init__(self) -> None:
        settings = get_settings()
        self._llm = ChatOpenAI(
            model=settings.openai_model,
            api_key=settings.openai_api_key,
            temperature=0.9,  # Varied examples on each click
            max_tokens=SUGGESTION_MAX_OUTPUT_TOKENS,
            model_kwargs={"response_format": {"type": "json_object"}},
        )

    async def suggest(self) -> SuggestionResult:
        """Return one set of example inputs, or raise GenerationError."""
        try:
            raw = await self._llm.ainvoke([HumanMessage(content=SUGGESTION_PROMPT)])
        except Exception as exc:
            logger.exception("Suggestion call failed")
            raise GenerationError(str(exc)) from exc

        return validate_output(raw.content, SuggestionResult)
