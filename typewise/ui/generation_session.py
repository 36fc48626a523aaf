"""Form-side state for one user: busy flags, current result, last error."""

from __future__ import annotations

import logging
from typing import Optional

from typewise.agents.message_agent import MessageAgent
from typewise.agents.output_parser import GenerationError
from typewise.agents.suggestion_agent import SuggestionAgent
from typewise.models.request_models import MessageRequest
from typewise.models.response_models import MessageResult, SuggestionResult
from typewise.ui.result_editor import ResultEditor

logger = logging.getLogger(__name__)

GENERATION_FAILED = "The AI could not generate a message. Please check your inputs and try again."
SUGGESTION_FAILED = "Could not fetch AI-powered suggestions. Please try again."


class SessionBusyError(RuntimeError):
    """Raised when an action is submitted while another call is in flight."""


class GenerationSession:
    """At most one in-flight call; always returns to ready afterwards."""

    def __init__(
        self,
        agent: MessageAgent | None = None,
        suggestion_agent: SuggestionAgent | None = None,
    ) -> None:
        self._agent = agent or MessageAgent()
        self._suggestion_agent = suggestion_agent
        self.is_loading = False
        self.is_suggesting = False
        self.result: Optional[MessageResult] = None
        self.editor = ResultEditor()
        self.last_error: Optional[str] = None

    @property
    def busy(self) -> bool:
        return self.is_loading or self.is_suggesting

    async def submit(self, request: MessageRequest) -> Optional[MessageResult]:
        """Generate a message; on failure record a single error and return None."""
        self._ensure_ready()
        self.is_loading = True
        self.result = None
        self.last_error = None
        try:
            result = await self._agent.generate(request)
        except GenerationError as exc:
            logger.warning("Generation failed: %s", exc)
            self.last_error = GENERATION_FAILED
            return None
        finally:
            self.is_loading = False

        self.result = result
        self.editor = ResultEditor(result.message)
        return result

    async def suggest(self) -> Optional[SuggestionResult]:
        """Fetch example inputs to pre-fill the form."""
        self._ensure_ready()
        self.is_suggesting = True
        self.result = None
        self.last_error = None
        try:
            if self._suggestion_agent is None:
                self._suggestion_agent = SuggestionAgent()
            return await self._suggestion_agent.suggest()
        except GenerationError as exc:
            logger.warning("Suggestion failed: %s", exc)
            self.last_error = SUGGESTION_FAILED
            return None
        finally:
            self.is_suggesting = False

    def _ensure_ready(self) -> None:
        if self.busy:
            raise SessionBusyError("Another request is already in progress")
