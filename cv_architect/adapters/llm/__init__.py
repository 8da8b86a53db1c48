"""LLM adapter layer - abstracts over multiple LLM providers."""

from cv_architect.adapters.llm.base import AbstractLLMClient, InlineData
from cv_architect.adapters.llm.factory import create_llm_client
from cv_architect.adapters.llm.gemini_client import GeminiClient
from cv_architect.adapters.llm.openai_client import OpenAIClient

__all__ = [
    "AbstractLLMClient",
    "GeminiClient",
    "InlineData",
    "OpenAIClient",
    "create_llm_client",
]
