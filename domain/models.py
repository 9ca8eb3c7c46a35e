from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Self
import uuid

import markdown2  # pyright: ignore[reportMissingTypeStubs]


CATEGORIES = (
    "My Food",
    "Breakfast",
    "Lunch",
    "Dinner",
    "Dessert",
    "Snacks",
    "Soups",
    "Salads",
    "Vegan",
    "Vegetarian",
    "Keto",
    "Gluten-Free",
    "Drinks",
)

DEFAULT_CATEGORY = "Dinner"
DEFAULT_IMAGE = (
    "https://images.unsplash.com/photo-1504674900247-0877df9cc836"
    "?q=80&w=1200&auto=format&fit=crop"
)
DEFAULT_PREP_TIME = "20 min"
DEFAULT_SERVINGS = 1
DEFAULT_CALORIES = 0
DEFAULT_DIFFICULTY = "Easy"


def new_id() -> str:
    return uuid.uuid4().hex


def _required_text(data: dict[str, Any], key: str) -> str:
    value = data[key]
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Stored recipe has no {key}.")
    return value


def _count(value: Any, *, default: int, minimum: int) -> int:
    count = int(value or default)
    return count if count >= minimum else default


class Owner(str, Enum):
    SAMPLE = "sample"
    USER = "me"

    @classmethod
    def parse(cls, value: Any) -> "Owner":
        # Anything that is not explicitly a sample belongs to the user.
        return cls.SAMPLE if value == cls.SAMPLE.value else cls.USER


@dataclass(frozen=True, kw_only=True)
class Recipe:
    id: str
    title: str
    category: str = DEFAULT_CATEGORY
    image: str = DEFAULT_IMAGE
    ingredients: tuple[str, ...] = ()
    instructions: str = ""
    prep_time: str = DEFAULT_PREP_TIME
    servings: int = DEFAULT_SERVINGS
    calories: int = DEFAULT_CALORIES
    difficulty: str = DEFAULT_DIFFICULTY
    owner: Owner = Owner.USER

    @property
    def is_sample(self) -> bool:
        return self.owner is Owner.SAMPLE

    @property
    def html(self) -> str:
        return markdown2.markdown(  # pyright: ignore[reportUnknownVariableType, reportUnknownMemberType]
            self.instructions
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "image": self.image,
            "ingredients": list(self.ingredients),
            "instructions": self.instructions,
            "prepTime": self.prep_time,
            "servings": self.servings,
            "calories": self.calories,
            "difficulty": self.difficulty,
            "owner": self.owner.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Build a recipe from its stored form.

        `id` and `title` are required, everything else falls back to the
        defaults a freshly added recipe gets.
        """
        return cls(
            id=_required_text(data, "id"),
            title=_required_text(data, "title"),
            category=str(data.get("category") or DEFAULT_CATEGORY),
            image=str(data.get("image") or DEFAULT_IMAGE),
            ingredients=tuple(str(i) for i in data.get("ingredients") or ()),
            instructions=str(data.get("instructions") or ""),
            prep_time=str(data.get("prepTime") or DEFAULT_PREP_TIME),
            servings=_count(data.get("servings"), default=DEFAULT_SERVINGS, minimum=1),
            calories=_count(data.get("calories"), default=DEFAULT_CALORIES, minimum=0),
            difficulty=str(data.get("difficulty") or DEFAULT_DIFFICULTY),
            owner=Owner.parse(data.get("owner")),
        )


@dataclass(frozen=True)
class AppState:
    recipes: tuple[Recipe, ...] = ()
    favorites: frozenset[str] = field(default_factory=frozenset)

    def find(self, recipe_id: str) -> Recipe | None:
        for recipe in self.recipes:
            if recipe.id == recipe_id:
                return recipe
        return None

    def is_favorite(self, recipe_id: str) -> bool:
        return recipe_id in self.favorites


def favorites_to_dict(favorites: frozenset[str]) -> dict[str, bool]:
    return {recipe_id: True for recipe_id in sorted(favorites)}


def favorites_from_dict(data: dict[str, Any]) -> frozenset[str]:
    return frozenset(str(k) for k, v in data.items() if v)
