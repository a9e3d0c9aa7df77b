"""LLM callers that satisfy the async prompt -> text contract."""
from .groq_client import GroqClient

__all__ = ["GroqClient"]
