"""Message Agent — turns a validated MessageRequest into generated text.

Uses LangChain with an OpenAI chat model in JSON mode to:
1. Send the assembled prompt with an output-length hint
2. Validate the reply against the text or subject/body schema
3. Return a MessageResult ready for display
"""

from __future__ import annotations

import logging

from langchain_openai import ChatOpenAI
from langchain_core.messages import HumanMessage

from typewise.config import get_settings
from typewise.agents.output_parser import GenerationError, validate_output
from typewise.models.request_models import MessageRequest
from typewise.models.response_models import (
    EmailMessageOutput,
    MessageResult,
    TextMessageOutput,
)
from typewise.prompts.message_prompt import (
    build_message_prompt,
    compute_max_output_tokens,
    is_structured,
)

logger = logging.getLogger(__name__)


class MessageAgent:
    """Stateless agent that produces a single message per call."""

    def __init__(self) -> None:
        settings = get_settings()
        self._model = settings.openai_model
        self._api_key = settings.openai_api_key
        self._temperature = settings.generation_temperature

    # ── Public API ────────────────────────────────────────────────────────

    async def generate(self, request: MessageRequest) -> MessageResult:
        """Generate a message for the given request.

        Exactly one provider call is made. Transport failures and replies
        that do not match the expected schema raise GenerationError.
        """
        prompt = build_message_prompt(request)
        max_tokens = compute_max_output_tokens(request.word_limit)
        llm = self._build_llm(max_tokens)

        logger.info(
            "Generating message type=%s word_limit=%s max_tokens=%d",
            request.message_type.value if request.message_type else "generic",
            request.word_limit,
            max_tokens,
        )

        try:
            raw = await llm.ainvoke([HumanMessage(content=prompt)])
        except Exception as exc:
            logger.exception("Generation call failed")
            raise GenerationError(str(exc)) from exc

        if is_structured(request.message_type):
            output = validate_output(raw.content, EmailMessageOutput)
            return MessageResult.from_email(output, request.message_type)

        output = validate_output(raw.content, TextMessageOutput)
        return MessageResult.from_text(output, request.message_type)

    # ── Helpers ───────────────────────────────────────────────────────────

    def _build_llm(self, max_tokens: int) -> ChatOpenAI:
        return ChatOpenAI(
            model=self._model,
            api_key=self._api_key,
            temperature=self._temperature,
            max_tokens=max_tokens,
            model_kwargs={"response_format": {"type": "json_object"}},
        )
