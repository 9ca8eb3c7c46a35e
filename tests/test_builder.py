import pytest

from domain.builder import RecipeForm, build_recipe, parse_ingredients
from domain.errors import RecipeValidationError
from domain.models import DEFAULT_IMAGE, Owner, Recipe


def fixed_id() -> str:
    return "fixed-id"


@pytest.mark.parametrize(
    "text,expected",
    (
        ("a\n\nb \n", ("a", "b")),
        ("  2 eggs\r\n1 cup milk\r\n\r\n", ("2 eggs", "1 cup milk")),
        ("", ()),
        ("\n \n\t\n", ()),
        ("one", ("one",)),
    ),
)
def test_parse_ingredients(text: str, expected: tuple[str, ...]) -> None:
    assert parse_ingredients(text) == expected


@pytest.mark.parametrize("title", ("", "   ", "\n\t"))
def test_blank_title_is_rejected(title: str) -> None:
    with pytest.raises(RecipeValidationError) as exc_info:
        build_recipe(RecipeForm(title=title))
    assert exc_info.value.field == "title"


def test_defaults_fill_blank_fields() -> None:
    form = RecipeForm(
        title="  Pancakes ",
        category=" ",
        image="  ",
        prep_time="",
        servings="",
        calories="",
        difficulty=" ",
    )
    got = build_recipe(form, id_factory=fixed_id)
    assert got == Recipe(
        id="fixed-id",
        title="Pancakes",
        category="Dinner",
        image=DEFAULT_IMAGE,
        ingredients=(),
        instructions="",
        prep_time="20 min",
        servings=1,
        calories=0,
        difficulty="Easy",
        owner=Owner.USER,
    )


@pytest.mark.parametrize(
    "servings,expected",
    (
        ("abc", 1),
        ("", 1),
        ("4", 4),
        (" 3 ", 3),
        ("2.7", 2),
        ("0", 1),
        ("-2", 1),
        ("nan", 1),
        ("inf", 1),
    ),
)
def test_servings_coercion(servings: str, expected: int) -> None:
    got = build_recipe(RecipeForm(title="Stew", servings=servings))
    assert got.servings == expected


@pytest.mark.parametrize(
    "calories,expected",
    (
        ("abc", 0),
        ("450", 450),
        ("0", 0),
        ("-10", 0),
        ("1e3", 1000),
    ),
)
def test_calories_coercion(calories: str, expected: int) -> None:
    got = build_recipe(RecipeForm(title="Stew", calories=calories))
    assert got.calories == expected


def test_add_generates_fresh_ids() -> None:
    first = build_recipe(RecipeForm(title="Stew"))
    second = build_recipe(RecipeForm(title="Stew"))
    assert first.id and second.id
    assert first.id != second.id


def test_edit_keeps_id_and_forces_user_owner() -> None:
    original = Recipe(id="sample-1", title="Toast", owner=Owner.SAMPLE)
    got = build_recipe(
        RecipeForm(title="Better Toast", ingredients="bread\nbutter"),
        original=original,
        id_factory=fixed_id,
    )
    assert got.id == "sample-1"
    assert got.owner is Owner.USER
    assert got.ingredients == ("bread", "butter")


def test_form_from_recipe_round_trips() -> None:
    original = Recipe(
        id="r1",
        title="Chili",
        category="Dinner",
        image="https://example.com/chili.jpg",
        ingredients=("beans", "beef"),
        instructions="Simmer.",
        prep_time="45 min",
        servings=6,
        calories=520,
        difficulty="Medium",
    )
    form = RecipeForm.from_recipe(original)
    assert form.ingredients == "beans\nbeef"
    assert form.servings == "6"
    assert build_recipe(form, original=original) == original
