from typing import Callable

from domain.builder import RecipeForm, build_recipe
from domain.errors import ReadOnlyRecipe, RecipeNotFound
from domain.intents import Add, Delete, ToggleFavorite, Update
from domain.models import AppState, Recipe, new_id
from domain.store import RecipeStore


ALL = "All"


def get_recipe(state: AppState, recipe_id: str) -> Recipe:
    recipe = state.find(recipe_id)
    if recipe is None:
        raise RecipeNotFound(recipe_id)
    return recipe


def recipes_in_category(state: AppState, category: str) -> list[Recipe]:
    if category == ALL:
        return list(state.recipes)
    return [r for r in state.recipes if r.category == category]


def favorite_recipes(state: AppState) -> list[Recipe]:
    return [r for r in state.recipes if r.id in state.favorites]


def my_recipes(state: AppState) -> list[Recipe]:
    return [r for r in state.recipes if not r.is_sample]


def editable_recipe(state: AppState, recipe_id: str) -> Recipe:
    recipe = get_recipe(state, recipe_id)
    if recipe.is_sample:
        raise ReadOnlyRecipe(recipe_id)
    return recipe


def create_recipe(
    form: RecipeForm,
    *,
    store: RecipeStore,
    id_factory: Callable[[], str] = new_id,
) -> Recipe:
    recipe = build_recipe(form, id_factory=id_factory)
    store.dispatch(Add(recipe))
    return recipe


def edit_recipe(recipe_id: str, form: RecipeForm, *, store: RecipeStore) -> Recipe:
    original = editable_recipe(store.state, recipe_id)
    recipe = build_recipe(form, original=original)
    store.dispatch(Update(recipe))
    return recipe


def delete_recipe(recipe_id: str, *, store: RecipeStore) -> None:
    editable_recipe(store.state, recipe_id)
    store.dispatch(Delete(recipe_id))


def toggle_favorite(recipe_id: str, *, store: RecipeStore) -> bool:
    state = store.dispatch(ToggleFavorite(recipe_id))
    return state.is_favorite(recipe_id)
