"""LLM abstraction layer - providers and factory."""

# Import providers first to trigger registration via decorators
from exam_prep.llm import openai_provider
from exam_prep.llm.factory import LLMFactory

__all__ = ["LLMFactory"]
