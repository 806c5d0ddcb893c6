"""Structured extraction on top of Pydantic AI.

Responsibilities
----------------

- Run a single prompt against the configured model and return an instance of
  the requested Pydantic ``output_type``.
- Normalize every failure into ``ExtractionError`` so callers only handle one
  error family.

The extractor does not decide what to do when AI is unavailable; services
catch ``AIServiceError`` and produce their own degraded results.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic_ai import Agent
from pydantic_ai.settings import ModelSettings

from smartcrm.core.monitoring import log_llm_call
from smartcrm.server.core.config import settings

from .errors import AIUnavailableError, ExtractionError

logger = logging.getLogger(__name__)

OutputT = TypeVar("OutputT", bound=BaseModel)

DEFAULT_SYSTEM_PROMPT = (
    "You are a data extraction assistant for a CRM application. "
    "Answer strictly in the requested structure and never invent identifiers."
)


class StructuredExtractor:
    """Extract validated Pydantic models from free text with a language model.

    The extractor supports two modes:

    - ``model=None``: AI is disabled and every call raises ``AIUnavailableError``.
      This is the default for tests and deployments without model credentials.
    - ``model!=None``: a Pydantic AI ``Agent`` is built per call with the
      requested ``output_type``.
    """

    def __init__(
        self,
        *,
        model: Any | None = None,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
        temperature: Optional[float] = None,
    ) -> None:
        """
        Initialize the extractor.

        Args:
            model: A Pydantic AI model instance or model string. ``None`` disables AI.
            system_prompt: Instructions prepended to every extraction.
            temperature: Optional sampling temperature passed as model settings.
        """
        self._model = model
        self._system_prompt = system_prompt
        self._temperature = temperature

    @property
    def available(self) -> bool:
        return self._model is not None

    @property
    def model_name(self) -> str:
        if self._model is None:
            return "none"
        if isinstance(self._model, str):
            return self._model
        return getattr(self._model, "model_name", type(self._model).__name__)

    async def extract(self, prompt: str, output_type: Type[OutputT]) -> OutputT:
        """Run ``prompt`` and return the model's answer as ``output_type``.

        Raises
        ------
        AIUnavailableError
            When no model is configured.
        ExtractionError
            When the model call fails or returns output that does not validate.
        """
        if self._model is None:
            raise AIUnavailableError()

        model_settings = ModelSettings(temperature=self._temperature) if self._temperature is not None else None

        started = time.perf_counter()
        try:
            # Model strings resolve here: unknown providers and missing keys raise at construction.
            agent: Agent = Agent(
                self._model,
                output_type=output_type,
                system_prompt=self._system_prompt,
            )
            result = await agent.run(prompt, model_settings=model_settings)
        except Exception as e:
            logger.warning(f"Extraction of {output_type.__name__} with model {self.model_name} failed: {e}")
            raise ExtractionError(output_type.__name__, str(e)) from e

        duration_ms = (time.perf_counter() - started) * 1000
        log_llm_call(model=self.model_name, purpose=output_type.__name__, duration_ms=duration_ms)
        logger.debug(f"Extracted {output_type.__name__} in {duration_ms:.1f}ms")
        return result.output


def build_extractor(model: Any | None = None, temperature: Optional[float] = None) -> StructuredExtractor:
    """Build an extractor from explicit arguments or, when omitted, from settings."""
    if model is None:
        model = settings.ai.model or None
        temperature = settings.ai.temperature if temperature is None else temperature
    return StructuredExtractor(model=model, temperature=temperature)


_extractor: Optional[StructuredExtractor] = None


def get_extractor() -> StructuredExtractor:
    """Return the process-wide extractor, building it from settings on first use."""
    global _extractor
    if _extractor is None:
        _extractor = build_extractor()
        if _extractor.available:
            logger.info(f"AI extraction enabled with model {_extractor.model_name}")
        else:
            logger.info("AI extraction disabled: SMARTCRM_AI_MODEL is not set")
    return _extractor
