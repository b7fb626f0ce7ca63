"""Absorb whatever JSON the model produced into `Recipe` records.

Only the top-level shape can fail. Every leaf is read explicitly and defaulted
when it is missing, null or empty.
"""

import logging
from typing import Any, TypeAlias
import uuid

from recipe_maker import prompts
from recipe_maker.errors import ErrorKind, GenerationError
from recipe_maker.models import Ingredient, Mode, Recipe


logger = logging.getLogger(__name__)


Json: TypeAlias = dict[str, Any] | list[Any] | str | int | float | bool | None


# Keys a model (or an older record) may carry its own id under.
ID_KEYS = ("idMeal", "id")


def new_id() -> str:
    return uuid.uuid4().hex


def _text(value: Any, default: str) -> str:
    if value is None or isinstance(value, (dict, list)):
        return default
    text = value if isinstance(value, str) else str(value)
    return text if text.strip() else default


def _ingredients(value: Any) -> tuple[Ingredient, ...]:
    if not isinstance(value, list):
        return ()
    ingredients: list[Ingredient] = []
    for i, entry in enumerate(value, start=1):
        entry = entry if isinstance(entry, dict) else {}
        ingredients.append(
            Ingredient(
                index=i,
                name=_text(entry.get(prompts.INGREDIENT_NAME_KEY), ""),
                measure=_text(entry.get(prompts.INGREDIENT_MEASURE_KEY), ""),
            )
        )
    return tuple(ingredients)


def _supplied_id(obj: dict[str, Any]) -> str | None:
    for key in ID_KEYS:
        supplied = _text(obj.get(key), "")
        if supplied:
            return supplied
    return None


def normalize_recipe(obj: dict[str, Any], *, recipe_id: str | None = None) -> Recipe:
    recipe_id = _supplied_id(obj) if recipe_id is None else recipe_id
    return Recipe(
        id=new_id() if recipe_id is None else recipe_id,
        name=_text(obj.get(prompts.NAME_KEY), "Unknown"),
        category=_text(obj.get(prompts.CATEGORY_KEY), "Unknown"),
        cuisine=_text(obj.get(prompts.CUISINE_KEY), "Unknown"),
        instructions=_text(obj.get(prompts.INSTRUCTIONS_KEY), "No instructions."),
        ingredients=_ingredients(obj.get(prompts.INGREDIENTS_KEY)),
    )


def normalize(decoded: Json, mode: Mode) -> list[Recipe]:
    match mode:
        case Mode.BY_INGREDIENTS:
            if not isinstance(decoded, list):
                raise GenerationError(
                    ErrorKind.INVALID_SHAPE,
                    f"Expected a JSON array, got {type(decoded).__name__}.",
                )
            objs = decoded
        case Mode.BY_NAME:
            objs = [decoded]
        case _:
            raise ValueError(f"Unsupported mode: {mode}")

    for obj in objs:
        if not isinstance(obj, dict):
            raise GenerationError(
                ErrorKind.INVALID_SHAPE,
                f"Expected a JSON object, got {type(obj).__name__}.",
            )

    recipes: list[Recipe] = []
    seen: set[str] = set()
    for obj in objs:
        recipe_id = _supplied_id(obj)
        if recipe_id in seen:
            logger.warning(f"Duplicate id {recipe_id} in batch, issuing a new one.")
            recipe_id = None
        if recipe_id is None:
            recipe_id = new_id()
        recipe = normalize_recipe(obj, recipe_id=recipe_id)
        seen.add(recipe.id)
        recipes.append(recipe)
    return recipes


def normalize_record(data: dict[str, Any]) -> Recipe | None:
    """Rebuild a `Recipe` from its `to_dict` form, as a client may send it back.

    Leaves are defaulted the same way as model output. Indices are reassigned by
    position. Returns None without a usable id.
    """
    recipe_id = _text(data.get("id"), "")
    if not recipe_id:
        return None
    return Recipe(
        id=recipe_id,
        name=_text(data.get("name"), "Unknown"),
        category=_text(data.get("category"), "Unknown"),
        cuisine=_text(data.get("cuisine"), "Unknown"),
        instructions=_text(data.get("instructions"), "No instructions."),
        ingredients=_ingredients(data.get("ingredients")),
    )
