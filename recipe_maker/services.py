import json
import logging
from typing import Any, Sequence

import httpx

from recipe_maker.errors import ErrorKind, GenerationError
from recipe_maker.gemini import TextGenerator
from recipe_maker.models import Mode, Recipe
from recipe_maker.normalize import normalize
from recipe_maker.prompts import build_prompt
from recipe_maker.sanitize import sanitize


logger = logging.getLogger(__name__)


def extract_text(body: str) -> str:
    """Pull `candidates[0].content.parts[0].text` out of a Gemini response."""
    try:
        data: Any = json.loads(body)
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (ValueError, LookupError, TypeError) as e:
        raise GenerationError(
            ErrorKind.EMPTY_RESPONSE, f"No text in response: {e!r}"
        ) from e
    if not isinstance(text, str) or not text.strip():
        raise GenerationError(ErrorKind.EMPTY_RESPONSE, "Empty response text.")
    return text


def decode(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError as e:
        raise GenerationError(ErrorKind.PARSE_FAILURE, str(e)) from e


class GenerationService:
    """Prompt, call, clean up and normalize. One external call per request.

    Retrying is left to the caller, as is making sure only one request runs
    at a time.
    """

    def __init__(self, generator: TextGenerator) -> None:
        self.generator = generator

    async def generate(
        self,
        mode: Mode | str,
        query: str | Sequence[str],
    ) -> list[Recipe]:
        mode = Mode(mode)
        prompt = build_prompt(mode, query)

        try:
            resp = await self.generator.generate(prompt)
        except httpx.TransportError as e:
            logger.warning(f"Could not reach the model: {e!r}")
            raise GenerationError(ErrorKind.NETWORK_FAILURE, repr(e)) from e

        if not resp.ok:
            logger.warning(f"Model returned status {resp.status}: {resp.body}")
            raise GenerationError(ErrorKind.HTTP_ERROR, resp.body, status=resp.status)

        try:
            cleaned = sanitize(extract_text(resp.body))
            logger.debug(f"Cleaned response: {cleaned}")
            recipes = normalize(decode(cleaned), mode)
        except GenerationError as e:
            logger.warning(f"No recipes for {mode.value} {query!r}: {e}")
            raise

        logger.info(f"Generated {len(recipes)} recipes for {mode.value} {query!r}.")
        return recipes
