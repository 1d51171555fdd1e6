from fintrack.providers.base import BaseProvider
from fintrack.providers.openai_provider import OpenAIProvider
from fintrack.providers.groq_provider import GroqProvider


__all__ = [
    "BaseProvider",
    "OpenAIProvider",
    "GroqProvider",
]
