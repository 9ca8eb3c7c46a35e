"""Turn what a user typed into a recipe the store will accept."""

from dataclasses import dataclass
import math
from typing import Callable, Self

from domain.errors import RecipeValidationError
from domain.models import (
    DEFAULT_CALORIES,
    DEFAULT_CATEGORY,
    DEFAULT_DIFFICULTY,
    DEFAULT_IMAGE,
    DEFAULT_PREP_TIME,
    DEFAULT_SERVINGS,
    Owner,
    Recipe,
    new_id,
)


@dataclass(frozen=True, kw_only=True)
class RecipeForm:
    title: str = ""
    category: str = DEFAULT_CATEGORY
    image: str = ""
    ingredients: str = ""
    instructions: str = ""
    prep_time: str = DEFAULT_PREP_TIME
    servings: str = str(DEFAULT_SERVINGS)
    calories: str = str(DEFAULT_CALORIES)
    difficulty: str = DEFAULT_DIFFICULTY

    @classmethod
    def from_recipe(cls, recipe: Recipe) -> Self:
        return cls(
            title=recipe.title,
            category=recipe.category,
            image=recipe.image,
            ingredients="\n".join(recipe.ingredients),
            instructions=recipe.instructions,
            prep_time=recipe.prep_time,
            servings=str(recipe.servings),
            calories=str(recipe.calories),
            difficulty=recipe.difficulty,
        )


def parse_ingredients(text: str) -> tuple[str, ...]:
    return tuple(line.strip() for line in text.splitlines() if line.strip())


def parse_number(text: str) -> float | None:
    try:
        value = float(text.strip())
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_count(text: str, *, default: int, minimum: int) -> int:
    value = parse_number(text)
    if value is None:
        return default
    count = int(value)
    return count if count >= minimum else default


def build_recipe(
    form: RecipeForm,
    *,
    original: Recipe | None = None,
    id_factory: Callable[[], str] = new_id,
) -> Recipe:
    """Normalise a submitted form.

    Only the title can fail. Every other field falls back to its default, and
    the result is always owned by the user. Editing keeps the original id.
    """
    title = form.title.strip()
    if not title:
        raise RecipeValidationError("title", "Please enter a recipe name.")

    return Recipe(
        id=id_factory() if original is None else original.id,
        title=title,
        category=form.category.strip() or DEFAULT_CATEGORY,
        image=form.image.strip() or DEFAULT_IMAGE,
        ingredients=parse_ingredients(form.ingredients),
        instructions=form.instructions.strip(),
        prep_time=form.prep_time.strip() or DEFAULT_PREP_TIME,
        servings=parse_count(form.servings, default=DEFAULT_SERVINGS, minimum=1),
        calories=parse_count(form.calories, default=DEFAULT_CALORIES, minimum=0),
        difficulty=form.difficulty.strip() or DEFAULT_DIFFICULTY,
        owner=Owner.USER,
    )
