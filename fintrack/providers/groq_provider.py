from fintrack.providers.openai_provider import OpenAIProvider


GROQ_MODELS = [
    "llama-3.3-70b-versatile",
    "llama-3.1-8b-instant",
]


class GroqProvider(OpenAIProvider):
    """Groq exposes the OpenAI chat completions API under its own endpoint."""

    endpoint = "https://api.groq.com/openai/v1/chat/completions"
    models = GROQ_MODELS

    @property
    def name(self) -> str:
        return "groq"
