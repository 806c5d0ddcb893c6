"""Error types for the AI extraction layer.

Services treat every error in this hierarchy as "AI is not available right
now" and fall back to a deterministic result.
"""

from __future__ import annotations


class AIServiceError(Exception):
    """Base error for all AI extraction failures."""


class AIUnavailableError(AIServiceError):
    """Raised when no language model is configured."""

    def __init__(self) -> None:
        super().__init__("No language model configured; set SMARTCRM_AI_MODEL to enable AI features")


class ExtractionError(AIServiceError):
    """Raised when the model call fails or its output cannot be validated."""

    def __init__(self, output_type: str, message: str) -> None:
        super().__init__(f"Structured extraction of '{output_type}' failed: {message}")
