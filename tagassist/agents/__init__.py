"""
AI components for the TagAssist backend.

1. Tagging (Single-Shot LLM Workflow)
   - Uses Gemini to recommend tags to add and remove for a work
   - NOT an ADK agent - uses the Google Gen AI SDK directly
   - Located in: tagassist/agents/tagging/
"""

from tagassist.agents.tagging import GeminiGenerationBackend, GenerationBackend

__all__ = [
    "GenerationBackend",
    "GeminiGenerationBackend",
]
