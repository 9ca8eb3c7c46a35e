import asyncio
from dataclasses import replace
import logging

from domain.errors import StoreNotReady
from domain.intents import Add, Delete, Intent, Load, ToggleFavorite, Update
from domain.models import AppState
from domain.repository import SnapshotRepository
from domain.samples import seed_state


logger = logging.getLogger(__name__)


def apply(state: AppState, intent: Intent) -> AppState:
    """Pure transition. Returns `state` itself whenever nothing changes."""
    match intent:
        case Load(recipes=None, favorites=None):
            return state
        case Load(recipes=recipes, favorites=favorites):
            return replace(
                state,
                recipes=state.recipes if recipes is None else recipes,
                favorites=state.favorites if favorites is None else favorites,
            )
        case Add(recipe=recipe):
            return replace(state, recipes=(recipe, *state.recipes))
        case Update(recipe=recipe):
            if state.find(recipe.id) is None:
                return state
            recipes = tuple(recipe if r.id == recipe.id else r for r in state.recipes)
            return replace(state, recipes=recipes)
        case Delete(recipe_id=recipe_id):
            if state.find(recipe_id) is None and recipe_id not in state.favorites:
                return state
            return AppState(
                recipes=tuple(r for r in state.recipes if r.id != recipe_id),
                favorites=state.favorites - {recipe_id},
            )
        case ToggleFavorite(recipe_id=recipe_id):
            return replace(state, favorites=state.favorites ^ {recipe_id})
        case _:  # pyright: ignore[reportUnnecessaryComparison]
            raise TypeError(f"Unknown intent: {intent!r}")


class RecipeStore:
    """Owns the app state. Every change goes through `dispatch`.

    The snapshot is restored once by `startup`, and dispatching is refused
    until then so a slow restore can never be clobbered by the seed state.
    """

    def __init__(
        self,
        repository: SnapshotRepository,
        *,
        initial: AppState | None = None,
    ) -> None:
        self.repository = repository
        self._state = seed_state() if initial is None else initial
        self._ready = False
        self._lock = asyncio.Lock()
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def ready(self) -> bool:
        return self._ready

    async def startup(self) -> AppState:
        if self._ready:
            return self._state
        snapshot = await self.repository.restore_snapshot()
        self._state = apply(self._state, snapshot.payload)
        self._ready = True
        if snapshot.recipes_missing:
            # First run, write the seed so sample ids stay stable. An
            # unreadable slot is left alone, it may still hold user recipes.
            self._schedule_persist(self._state)
        logger.info(
            "Store ready with %d recipes and %d favorites.",
            len(self._state.recipes),
            len(self._state.favorites),
        )
        return self._state

    def dispatch(self, intent: Intent) -> AppState:
        if not self._ready:
            raise StoreNotReady("Store has not been restored yet.")
        previous = self._state
        self._state = apply(previous, intent)
        if self._state != previous:
            self._schedule_persist(self._state)
        return self._state

    def _schedule_persist(self, state: AppState) -> None:
        task = asyncio.create_task(self._persist(state))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _persist(self, state: AppState) -> None:
        # The lock hands out turns in arrival order, so slots are written in
        # the same order as the dispatches that produced them.
        async with self._lock:
            await self.repository.persist(state.recipes, state.favorites)

    async def flush(self) -> None:
        while self._pending:
            await asyncio.gather(*self._pending)
