import json
from typing import Any, Callable

import httpx
import pytest

from recipe_maker.config import Config
from recipe_maker.gemini import GeminiClient


def gemini_body(text: str) -> dict[str, Any]:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def fenced(value: Any) -> str:
    return f"```json\n{json.dumps(value)}\n```"


@pytest.fixture
def config() -> Config:
    return Config(
        gemini_api_key="test-key",
        gemini_model="gemini-1.5-flash",
        db_url="sqlite+aiosqlite:///unused.db",
    )


@pytest.fixture
def gemini(config: Config) -> Callable[[httpx.MockTransport], GeminiClient]:
    def factory(transport: httpx.MockTransport) -> GeminiClient:
        client = httpx.AsyncClient(base_url=config.gemini_base_url, transport=transport)
        return GeminiClient(config=config, client=client)

    return factory
