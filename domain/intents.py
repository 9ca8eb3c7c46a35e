"""The requests the store understands. One class per transition."""

from dataclasses import dataclass
from typing import TypeAlias

from domain.models import Recipe


@dataclass(frozen=True)
class Load:
    recipes: tuple[Recipe, ...] | None = None
    favorites: frozenset[str] | None = None

    @property
    def empty(self) -> bool:
        return self.recipes is None and self.favorites is None


@dataclass(frozen=True)
class Add:
    recipe: Recipe


@dataclass(frozen=True)
class Update:
    recipe: Recipe


@dataclass(frozen=True)
class Delete:
    recipe_id: str


@dataclass(frozen=True)
class ToggleFavorite:
    recipe_id: str


Intent: TypeAlias = Load | Add | Update | Delete | ToggleFavorite
