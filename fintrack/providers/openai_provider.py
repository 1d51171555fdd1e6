import httpx
from fintrack.providers.base import BaseProvider


OPENAI_MODELS = [
    "gpt-4o-mini",
    "gpt-3.5-turbo",
]


class OpenAIProvider(BaseProvider):
    """Provider for OpenAI-compatible chat completion APIs using httpx."""

    endpoint = "https://api.openai.com/v1/chat/completions"
    models = OPENAI_MODELS

    def __init__(self, api_key: str, transport: httpx.AsyncBaseTransport | None = None):
        self.api_key = api_key
        self.transport = transport

    @property
    def name(self) -> str:
        return "openai"

    def _result(self, model: str, text: str | None = None, error: str | None = None) -> dict:
        return {
            "text": text,
            "provider": self.name,
            "model": model,
            "status": "failed" if error else "success",
            "error": error,
        }

    async def chat(self, messages: list[dict], model: str | None = None) -> dict:
        used_model = model or self.models[0]
        try:
            headers = {
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            }
            body = {
                "model": used_model,
                "messages": messages,
                "max_tokens": 1024,
            }

            async with httpx.AsyncClient(timeout=30.0, transport=self.transport) as client:
                response = await client.post(self.endpoint, headers=headers, json=body)
                response.raise_for_status()
                data = response.json()
                text = data["choices"][0]["message"]["content"] if data.get("choices") else None

            if not text:
                return self._result(used_model, error="Empty response")
            return self._result(used_model, text=text)
        except httpx.TimeoutException:
            return self._result(used_model, error="Timeout")
        except httpx.HTTPStatusError as e:
            return self._result(used_model, error=f"HTTP {e.response.status_code}")
        except Exception as e:
            return self._result(used_model, error=str(e))
