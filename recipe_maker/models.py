from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Mode(Enum):
    BY_NAME = "by-name"
    BY_INGREDIENTS = "by-ingredients"

    @classmethod
    def _missing_(cls, value: object) -> "Mode | None":
        # Search modes as the front end names them.
        aliases = {
            "name": cls.BY_NAME,
            "ingredient": cls.BY_INGREDIENTS,
            "ingredients": cls.BY_INGREDIENTS,
        }
        if isinstance(value, str):
            return aliases.get(value.strip().lower())
        return None

    @property
    def label(self) -> str:
        """What the search box calls this mode."""
        return "name" if self is Mode.BY_NAME else "ingredient"


@dataclass(frozen=True)
class Ingredient:
    index: int
    name: str
    measure: str

    def to_dict(self) -> dict[str, Any]:
        return {"index": self.index, "name": self.name, "measure": self.measure}


@dataclass(frozen=True)
class Recipe:
    id: str
    name: str = "Unknown"
    category: str = "Unknown"
    cuisine: str = "Unknown"
    instructions: str = "No instructions."
    ingredients: tuple[Ingredient, ...] = field(default_factory=tuple)

    def __repr__(self) -> str:
        return f"<Recipe(id={self.id}, name={self.name})>"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "cuisine": self.cuisine,
            "instructions": self.instructions,
            "ingredients": [i.to_dict() for i in self.ingredients],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Recipe":
        """Rebuild a record written by `to_dict`."""
        return cls(
            id=data["id"],
            name=data["name"],
            category=data["category"],
            cuisine=data["cuisine"],
            instructions=data["instructions"],
            ingredients=tuple(
                Ingredient(index=i["index"], name=i["name"], measure=i["measure"])
                for i in data["ingredients"]
            ),
        )
