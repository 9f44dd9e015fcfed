"""LLM abstraction - OpenAI-compatible."""

from anecdote.llm.base import InlineImage, LLMClient
from anecdote.llm.openai_client import OpenAIClient

__all__ = ["InlineImage", "LLMClient", "OpenAIClient"]
