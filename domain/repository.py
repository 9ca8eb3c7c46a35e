from dataclasses import dataclass
import json
import logging
from typing import Any, Iterable, Protocol

from domain.intents import Load
from domain.models import Recipe, favorites_from_dict, favorites_to_dict


logger = logging.getLogger(__name__)


class KeyValueBackend(Protocol):
    async def get(self, key: str) -> str | None:
        ...

    async def set(self, key: str, value: str) -> None:
        ...


@dataclass(frozen=True)
class Snapshot:
    payload: Load
    # Only true when the backend answered and had nothing under the key. A
    # slot that failed to read or parse is not missing, it is unreadable.
    recipes_missing: bool


class SnapshotRepository:
    """Mirrors the recipes and favorites into two slots of a key-value backend.

    Both directions are best-effort. A slot that cannot be read or parsed
    contributes nothing to the restore and a failed write is logged and
    forgotten; the state in memory stays the source of truth for the session.
    """

    def __init__(self, backend: KeyValueBackend, *, namespace: str = "foodie") -> None:
        self.backend = backend
        self.recipes_key = f"{namespace}:recipes"
        self.favorites_key = f"{namespace}:favorites"

    async def _read(self, key: str) -> tuple[bool, Any]:
        """Return whether the slot holds anything, and its parsed value."""
        try:
            raw = await self.backend.get(key)
        except Exception:
            logger.exception("Could not read %s.", key)
            return True, None
        if raw is None:
            return False, None
        try:
            return True, json.loads(raw)
        except ValueError:
            logger.warning("Ignoring unparsable snapshot in %s.", key)
            return True, None

    def _parse_recipes(self, data: Any) -> tuple[Recipe, ...] | None:
        if not isinstance(data, list):
            return None
        try:
            return tuple(Recipe.from_dict(r) for r in data)  # pyright: ignore[reportUnknownArgumentType, reportUnknownVariableType]
        except (KeyError, TypeError, ValueError, AttributeError):
            logger.warning("Ignoring malformed recipes in %s.", self.recipes_key)
            return None

    def _parse_favorites(self, data: Any) -> frozenset[str] | None:
        if not isinstance(data, dict):
            return None
        return favorites_from_dict(data)  # pyright: ignore[reportUnknownArgumentType]

    async def restore_snapshot(self) -> Snapshot:
        recipes_stored, recipes = await self._read(self.recipes_key)
        _, favorites = await self._read(self.favorites_key)
        payload = Load(
            recipes=self._parse_recipes(recipes),
            favorites=self._parse_favorites(favorites),
        )
        logger.info(
            "Restored snapshot: recipes=%s favorites=%s",
            "absent" if payload.recipes is None else len(payload.recipes),
            "absent" if payload.favorites is None else len(payload.favorites),
        )
        return Snapshot(payload=payload, recipes_missing=not recipes_stored)

    async def restore(self) -> Load:
        return (await self.restore_snapshot()).payload

    async def _write(self, key: str, value: str) -> None:
        try:
            await self.backend.set(key, value)
        except Exception:
            logger.exception("Could not write %s.", key)

    async def persist(
        self,
        recipes: Iterable[Recipe],
        favorites: frozenset[str],
    ) -> None:
        await self._write(
            self.recipes_key, json.dumps([r.to_dict() for r in recipes])
        )
        await self._write(self.favorites_key, json.dumps(favorites_to_dict(favorites)))
