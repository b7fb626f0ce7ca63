from typing import Sequence

from recipe_maker.models import Mode


# Keys requested from the model. `normalize` reads exactly these.
NAME_KEY = "strMeal"
CATEGORY_KEY = "strCategory"
CUISINE_KEY = "strArea"
INSTRUCTIONS_KEY = "strInstructions"
INGREDIENTS_KEY = "strIngredients"
INGREDIENT_NAME_KEY = "name"
INGREDIENT_MEASURE_KEY = "measure"


DETAILS = (
    "provide the recipe name, category (e.g., Main Course, Dessert), "
    "cuisine (e.g., Italian, Indian), ingredients with measurements, "
    "and detailed instructions."
)

FIELDS = (
    f"'{NAME_KEY}', '{CATEGORY_KEY}', '{CUISINE_KEY}', '{INSTRUCTIONS_KEY}', "
    f"and '{INGREDIENTS_KEY}' (an array of objects with "
    f"'{INGREDIENT_NAME_KEY}' and '{INGREDIENT_MEASURE_KEY}')"
)

BY_INGREDIENTS_PROMPT = (
    "Generate a list of recipes that can be made using the following "
    "ingredients: {ingredients}. For each recipe, " + DETAILS + " "
    "Format the response as a JSON array of objects, each containing "
    + FIELDS
    + "."
)

BY_NAME_PROMPT = (
    "Generate a recipe for a dish named '{name}'. Please " + DETAILS + " "
    "Format the response as a JSON object with " + FIELDS + "."
)


def build_prompt(mode: Mode, query: str | Sequence[str]) -> str:
    match mode:
        case Mode.BY_INGREDIENTS:
            if isinstance(query, str):
                query = [query]
            ingredients = list(dict.fromkeys(i.strip() for i in query if i.strip()))
            if not ingredients:
                raise ValueError("Provide at least one ingredient.")
            return BY_INGREDIENTS_PROMPT.format(ingredients=", ".join(ingredients))
        case Mode.BY_NAME:
            if not isinstance(query, str) or not query.strip():
                raise ValueError("Provide a dish name.")
            return BY_NAME_PROMPT.format(name=query.strip())
        case _:
            raise ValueError(f"Unsupported mode: {mode}")
