import logging
from typing import Any, Protocol

import httpx

from recipe_maker.config import Config
from recipe_maker.errors import ErrorKind, GenerationError


logger = logging.getLogger(__name__)


class TextResponse:
    def __init__(self, status: int, body: str) -> None:
        self.status = status
        self.body = body

    def __repr__(self) -> str:
        return f"<TextResponse(status={self.status}, length={len(self.body)})>"

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class TextGenerator(Protocol):
    async def generate(self, prompt: str) -> TextResponse:
        ...


def gemini_client_factory(config: Config) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=config.gemini_base_url,
        headers={"Content-Type": "application/json"},
        timeout=config.timeout,
    )


class GeminiClient:
    """Single-shot calls to Gemini's `generateContent` endpoint."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str | None = None,
        client: httpx.AsyncClient | None = None,
        config: Config | None = None,
    ) -> None:
        config = Config() if config is None else config
        self.api_key = config.gemini_api_key if api_key is None else api_key
        self.model = config.gemini_model if model is None else model
        self._client = gemini_client_factory(config) if client is None else client

    @staticmethod
    def payload(prompt: str) -> dict[str, Any]:
        return {"contents": [{"parts": [{"text": prompt}]}]}

    async def generate(self, prompt: str) -> TextResponse:
        if not self.api_key:
            raise GenerationError(
                ErrorKind.MISSING_CREDENTIAL, "Gemini API key not configured."
            )
        resp = await self._client.post(
            f"models/{self.model}:generateContent",
            params={"key": self.api_key},
            json=self.payload(prompt),
        )
        logger.info(f"Gemini responded {resp.status_code}.")
        return TextResponse(resp.status_code, resp.text)

    async def close(self) -> None:
        await self._client.aclose()
