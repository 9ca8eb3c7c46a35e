from typing import Callable

from domain.models import AppState, Owner, Recipe, new_id


def sample_recipes(id_factory: Callable[[], str] = new_id) -> tuple[Recipe, ...]:
    return (
        Recipe(
            id=id_factory(),
            title="Avocado Toast",
            category="Breakfast",
            image=(
                "https://images.unsplash.com/photo-1551183053-bf91a1d81141"
                "?q=80&w=1200&auto=format&fit=crop"
            ),
            ingredients=(
                "2 slices sourdough",
                "1 ripe avocado",
                "Salt & pepper",
                "Chili flakes (optional)",
                "1 tsp lemon juice",
            ),
            instructions=(
                "Toast bread. Mash avocado with lemon, salt and pepper. "
                "Spread on toast. Top with chili."
            ),
            prep_time="10 min",
            servings=1,
            calories=320,
            difficulty="Easy",
            owner=Owner.SAMPLE,
        ),
        Recipe(
            id=id_factory(),
            title="Classic Caesar Salad",
            category="Salads",
            image=(
                "https://images.unsplash.com/photo-1540420773420-3366772f4999"
                "?q=80&w=1200&auto=format&fit=crop"
            ),
            ingredients=(
                "1 romaine lettuce",
                "Croutons",
                "Parmesan",
                "Caesar dressing",
                "Chicken (optional)",
            ),
            instructions=(
                "Chop lettuce. Toss with dressing, croutons and parmesan. "
                "Add chicken if desired."
            ),
            prep_time="15 min",
            servings=2,
            calories=280,
            difficulty="Easy",
            owner=Owner.SAMPLE,
        ),
        Recipe(
            id=id_factory(),
            title="Spaghetti Bolognese",
            category="Dinner",
            image=(
                "https://images.unsplash.com/photo-1523986371872-9d3ba2e2f642"
                "?q=80&w=1200&auto=format&fit=crop"
            ),
            ingredients=(
                "200g spaghetti",
                "250g ground beef",
                "1 onion, 2 garlic",
                "Tomato sauce",
                "Salt, pepper, herbs",
            ),
            instructions=(
                "Cook pasta. Brown beef with onion & garlic. "
                "Add sauce and simmer. Combine with pasta."
            ),
            prep_time="35 min",
            servings=2,
            calories=640,
            difficulty="Medium",
            owner=Owner.SAMPLE,
        ),
    )


def seed_state(id_factory: Callable[[], str] = new_id) -> AppState:
    return AppState(recipes=sample_recipes(id_factory), favorites=frozenset())
