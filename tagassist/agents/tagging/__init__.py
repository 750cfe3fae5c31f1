"""
Tagging agent package.

Single-shot LLM workflow that asks Gemini for tag recommendations.

Main Components:
- prompts: System prompt, output schema and user prompt builder
- agent: GenerationBackend protocol and the Gemini implementation

Parsing and validation of the response live in
tagassist/services/response_parser.py; the model output is never trusted
as-is.
"""

from tagassist.agents.tagging.agent import GeminiGenerationBackend, GenerationBackend
from tagassist.agents.tagging.prompts import (
    TAGGING_OUTPUT_SCHEMA,
    TAGGING_SYSTEM_PROMPT,
    build_tagging_user_prompt,
    format_vocabulary,
)

__all__ = [
    # Backends
    "GenerationBackend",
    "GeminiGenerationBackend",
    # Prompts
    "TAGGING_SYSTEM_PROMPT",
    "TAGGING_OUTPUT_SCHEMA",
    "build_tagging_user_prompt",
    "format_vocabulary",
]
