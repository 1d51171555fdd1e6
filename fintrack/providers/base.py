from abc import ABC, abstractmethod


class BaseProvider(ABC):
    """A chat-completion backend the finance assistant can answer through.

    Providers never raise for upstream trouble: timeouts, HTTP errors and empty
    completions come back as a failed result so ChatService can fall back to
    the next key or provider.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Key under which the provider's API keys are configured."""
        ...

    @abstractmethod
    async def chat(self, messages: list[dict], model: str | None = None) -> dict:
        """Complete a conversation that already starts with the assistant's system prompt.

        The result carries ``text``, ``provider``, ``model``, ``status``
        ("success" or "failed") and ``error``. A rate-limited key must put
        "429" in ``error``; ChatService then retries with the provider's next key.
        """
        ...
