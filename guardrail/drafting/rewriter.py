"""Remote rewrite providers for prose tightening."""

import logging
from typing import Protocol

import httpx
import ollama

from guardrail.core.config import RewriteSettings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an editor tightening drafted prose for a systematic review. "
    "Make the text more concise without adding new facts. Keep every "
    "placeholder of the form <<C0>>, <<C1>>, ... exactly as written. "
    "Respond ONLY with the rewritten text."
)


class RewriteProviderError(RuntimeError):
    """The rewrite capability failed or returned an unusable response."""


class RewriteProvider(Protocol):
    async def rewrite(self, text: str) -> str: ...


# ── Ollama ───────────────────────────────────────────────────────────


class OllamaRewriter:
    """Rewrite provider backed by a local Ollama model."""

    def __init__(
        self,
        model: str = "qwen3:8b",
        host: str | None = None,
        temperature: float = 0.0,
    ):
        self.model = model
        self.temperature = temperature
        self._client = ollama.AsyncClient(host=host)

    @classmethod
    def from_settings(cls, settings: RewriteSettings) -> "OllamaRewriter":
        return cls(
            model=settings.model,
            host=settings.host,
            temperature=settings.temperature,
        )

    async def rewrite(self, text: str) -> str:
        """Return the tightened text, or raise RewriteProviderError."""
        try:
            response = await self._client.chat(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {
                        "role": "user",
                        "content": f"/no_think\nTighten this text without adding new facts:\n\n{text}",
                    },
                ],
                options={"temperature": self.temperature},
                think=False,
            )
        except (ollama.ResponseError, httpx.HTTPError, ConnectionError, OSError) as exc:
            raise RewriteProviderError(f"Ollama rewrite failed: {exc}") from exc

        content = getattr(getattr(response, "message", None), "content", None)
        if not isinstance(content, str) or not content.strip():
            raise RewriteProviderError("Ollama returned an empty or malformed rewrite")

        logger.debug("Ollama rewrite: %d → %d chars", len(text), len(content))
        return content.strip()

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._client.close()
