import copy
from typing import Any

import pytest

from recipe_maker.errors import ErrorKind, GenerationError
from recipe_maker.models import Ingredient, Mode
from recipe_maker.normalize import normalize, normalize_record


def test_by_name_defaults() -> None:
    (recipe,) = normalize({"strMeal": "Tea"}, Mode.BY_NAME)
    assert recipe.name == "Tea"
    assert recipe.category == "Unknown"
    assert recipe.cuisine == "Unknown"
    assert recipe.instructions == "No instructions."
    assert recipe.ingredients == ()
    assert recipe.id


def test_by_ingredients_empty_list() -> None:
    assert normalize([], Mode.BY_INGREDIENTS) == []


def test_ingredients_keep_order() -> None:
    decoded = {
        "strMeal": "Eggs",
        "strIngredients": [
            {"name": "Salt", "measure": "1tsp"},
            {"name": "Egg", "measure": "2"},
        ],
    }
    (recipe,) = normalize(decoded, Mode.BY_NAME)
    assert recipe.ingredients == (
        Ingredient(index=1, name="Salt", measure="1tsp"),
        Ingredient(index=2, name="Egg", measure="2"),
    )


def test_malformed_ingredient_entries() -> None:
    decoded = {
        "strIngredients": [
            {"name": "Flour"},
            {"measure": "2 cups"},
            "sugar",
            {"name": None, "measure": 3},
        ]
    }
    (recipe,) = normalize(decoded, Mode.BY_NAME)
    assert [(i.index, i.name, i.measure) for i in recipe.ingredients] == [
        (1, "Flour", ""),
        (2, "", "2 cups"),
        (3, "", ""),
        (4, "", "3"),
    ]


@pytest.mark.parametrize("ingredients", (None, "salt, pepper", {"name": "Salt"}))
def test_ingredients_not_a_list(ingredients: Any) -> None:
    (recipe,) = normalize({"strIngredients": ingredients}, Mode.BY_NAME)
    assert recipe.ingredients == ()


def test_empty_and_null_fields_default() -> None:
    decoded = {"strMeal": "", "strCategory": None, "strArea": "  ", "strInstructions": []}
    (recipe,) = normalize(decoded, Mode.BY_NAME)
    assert recipe.name == "Unknown"
    assert recipe.category == "Unknown"
    assert recipe.cuisine == "Unknown"
    assert recipe.instructions == "No instructions."


def test_by_ingredients_object_is_invalid_shape() -> None:
    with pytest.raises(GenerationError) as e:
        normalize({"strMeal": "Tea"}, Mode.BY_INGREDIENTS)
    assert e.value.kind is ErrorKind.INVALID_SHAPE


@pytest.mark.parametrize(
    "decoded,mode",
    (
        ([{"strMeal": "Tea"}], Mode.BY_NAME),
        ("Tea", Mode.BY_NAME),
        ([{"strMeal": "Tea"}, "Cake"], Mode.BY_INGREDIENTS),
        (None, Mode.BY_INGREDIENTS),
    ),
)
def test_invalid_shapes(decoded: Any, mode: Mode) -> None:
    with pytest.raises(GenerationError) as e:
        normalize(decoded, mode)
    assert e.value.kind is ErrorKind.INVALID_SHAPE
    assert e.value.is_empty_result


def test_by_ingredients_batch() -> None:
    decoded = [
        {"strMeal": "Soup", "strArea": "French"},
        {"strMeal": "Salad"},
        {},
    ]
    recipes = normalize(decoded, Mode.BY_INGREDIENTS)
    assert [r.name for r in recipes] == ["Soup", "Salad", "Unknown"]
    assert recipes[0].cuisine == "French"
    assert len({r.id for r in recipes}) == 3


def test_ids_are_fresh_not_derived() -> None:
    (first,) = normalize({"strMeal": "Tea"}, Mode.BY_NAME)
    (second,) = normalize({"strMeal": "Tea"}, Mode.BY_NAME)
    assert first.id != second.id


def test_supplied_ids() -> None:
    decoded = [
        {"idMeal": "52772", "strMeal": "Teriyaki"},
        {"idMeal": "52772", "strMeal": "Teriyaki again"},
        {"id": 7, "strMeal": "Seven"},
    ]
    recipes = normalize(decoded, Mode.BY_INGREDIENTS)
    assert recipes[0].id == "52772"
    assert recipes[1].id not in ("52772", "")
    assert recipes[2].id == "7"


def test_does_not_mutate_input() -> None:
    decoded = [{"strMeal": "Tea", "strIngredients": [{"name": "Leaves"}]}]
    before = copy.deepcopy(decoded)
    normalize(decoded, Mode.BY_INGREDIENTS)
    assert decoded == before


def test_normalize_record() -> None:
    got = normalize_record(
        {
            "id": 12,
            "name": "Tea",
            "category": None,
            "ingredients": [{"index": 4, "name": "Leaves"}, "junk"],
        }
    )
    assert got is not None
    assert got.id == "12"
    assert got.name == "Tea"
    assert got.category == "Unknown"
    assert got.ingredients == (
        Ingredient(index=1, name="Leaves", measure=""),
        Ingredient(index=2, name="", measure=""),
    )


@pytest.mark.parametrize("data", ({}, {"id": ""}, {"id": None}, {"id": ["a"]}))
def test_normalize_record_needs_an_id(data: dict[str, Any]) -> None:
    assert normalize_record(data) is None
