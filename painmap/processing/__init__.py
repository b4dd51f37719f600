"""Prompt construction, text generation, and the summary orchestration state machine."""

from painmap.processing.llm_client import (
    LLMChatRoute,
    OpenAITextGenerator,
    TextGenerator,
    TransportFailureError,
)
from painmap.processing.summary_orchestrator import (
    GenerationOrchestrator,
    SummaryEvent,
    SummaryEventKind,
    SummaryGenerationError,
    SummaryOptions,
    SummaryOutcome,
    SummaryProvenance,
    SummaryRequest,
    SummaryValidationError,
    produce_summary,
)
from painmap.processing.summary_prompts import SummaryAudience, SummaryTone, build_summary_prompt

__all__ = [
    "GenerationOrchestrator",
    "LLMChatRoute",
    "OpenAITextGenerator",
    "SummaryAudience",
    "SummaryEvent",
    "SummaryEventKind",
    "SummaryGenerationError",
    "SummaryOptions",
    "SummaryOutcome",
    "SummaryProvenance",
    "SummaryRequest",
    "SummaryTone",
    "SummaryValidationError",
    "TextGenerator",
    "TransportFailureError",
    "build_summary_prompt",
    "produce_summary",
]
