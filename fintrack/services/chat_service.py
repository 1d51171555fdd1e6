"""
chat_service.py — Chat assistant
Sends a conversation to the configured chat providers in priority order,
trying every key of a provider before falling back to the next one.
"""

import logging
import time

from fintrack import config
from fintrack.providers.openai_provider import OpenAIProvider
from fintrack.providers.groq_provider import GroqProvider

logger = logging.getLogger(__name__)


# Default priority order (lower = tried first)
_DEFAULT_PROVIDERS = [
    {"name": "openai", "provider_class": OpenAIProvider, "priority": 1},
    {"name": "groq",   "provider_class": GroqProvider,   "priority": 2},
]


def _configured_keys() -> dict[str, list[str]]:
    return {
        "openai": config.OPENAI_API_KEYS,
        "groq": config.GROQ_API_KEYS,
    }


class ChatService:
    """Route chat requests to the first provider that answers."""

    def __init__(self, keys: dict[str, list[str]] | None = None, providers: list[dict] | None = None,
                 system_prompt: str | None = None):
        keys = keys if keys is not None else _configured_keys()
        self.system_prompt = system_prompt or config.CHAT_SYSTEM_PROMPT
        self.providers: list[dict] = []
        for p in sorted(_DEFAULT_PROVIDERS if providers is None else providers, key=lambda p: p["priority"]):
            # Only include providers that have at least one key configured
            if keys.get(p["name"]):
                self.providers.append({**p, "keys": list(keys[p["name"]])})

    @property
    def is_configured(self) -> bool:
        return bool(self.providers)

    def build_messages(self, messages: list[dict]) -> list[dict]:
        """Prepend the assistant's system prompt, dropping any the client sent."""
        history = [m for m in messages if m.get("role") != "system"]
        return [{"role": "system", "content": self.system_prompt}, *history]

    async def reply(self, messages: list[dict], model: str | None = None) -> dict:
        """Returns dict with keys: text, provider, model, status, error, response_time."""
        prompt = self.build_messages(messages)
        last_error = "No chat provider configured"

        for entry in self.providers:
            for api_key in entry["keys"]:
                provider = entry["provider_class"](api_key=api_key)
                t0 = time.time()
                result = await provider.chat(prompt, model)
                elapsed = round(time.time() - t0, 3)

                if result.get("status") == "success":
                    return {**result, "response_time": elapsed}

                last_error = result.get("error") or f"{entry['name']} returned an error"
                logger.warning(f"Chat provider {entry['name']} failed: {last_error}")
                # Rate limits are per key, anything else is per provider
                if "429" not in str(last_error):
                    break

        return {
            "text": None,
            "provider": None,
            "model": None,
            "status": "failed",
            "error": last_error,
            "response_time": 0,
        }
