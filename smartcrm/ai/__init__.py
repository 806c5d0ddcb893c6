"""
AI helpers for SmartCRM.

Exposes ``StructuredExtractor``, a thin wrapper around a Pydantic AI agent that
turns a prompt into a validated Pydantic model, and the errors it raises.
"""

from .errors import AIServiceError, AIUnavailableError, ExtractionError
from .extractor import StructuredExtractor, build_extractor, get_extractor

__all__ = [
    "AIServiceError",
    "AIUnavailableError",
    "ExtractionError",
    "StructuredExtractor",
    "build_extractor",
    "get_extractor",
]
