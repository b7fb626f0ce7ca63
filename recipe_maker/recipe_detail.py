from typing import Any

from markdown2 import (  # pyright: ignore[reportMissingTypeStubs]
    markdown,  # pyright: ignore[reportUnknownVariableType]
)

from recipe_maker import prompts
from recipe_maker.models import Recipe


class RecipeDetail:
    """How a recipe is shown to people, and to older clients."""

    def __init__(self, recipe: Recipe) -> None:
        self.recipe = recipe

    @property
    def title(self) -> str:
        return self.recipe.name

    @property
    def subtitle(self) -> str:
        return f"{self.recipe.category} • {self.recipe.cuisine}"

    @property
    def markdown(self) -> str:
        lines = [f"### {self.title}", "", self.subtitle, "", "#### Ingredients", ""]
        for ingredient in self.recipe.ingredients:
            if not ingredient.name:
                continue
            measure = ingredient.measure.strip()
            line = f"{measure} {ingredient.name}" if measure else ingredient.name
            lines.append(f"- {line}")
        lines += ["", "#### Instructions", "", self.recipe.instructions]
        return "\n".join(lines)

    @property
    def html(self) -> str:
        return markdown(  # pyright: ignore[reportUnknownVariableType]
            self.markdown, extras=["fences", "tables"]
        )

    def numbered_fields(self) -> dict[str, Any]:
        """Flat `strIngredient1`, `strMeasure1`, ... view of the recipe."""
        fields: dict[str, Any] = {
            "idMeal": self.recipe.id,
            prompts.NAME_KEY: self.recipe.name,
            prompts.CATEGORY_KEY: self.recipe.category,
            prompts.CUISINE_KEY: self.recipe.cuisine,
            prompts.INSTRUCTIONS_KEY: self.recipe.instructions,
        }
        for ingredient in self.recipe.ingredients:
            fields[f"strIngredient{ingredient.index}"] = ingredient.name
            fields[f"strMeasure{ingredient.index}"] = ingredient.measure
        return fields
