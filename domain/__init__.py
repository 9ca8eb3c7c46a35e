"""Describes the Foodie domain. Centres around the `RecipeStore`.

Why is this easy?

- One user, one device, one list of recipes and a set of favorites.
- Every change is one of five intents applied to an immutable `AppState`.
- Durability is a mirror. Two string slots in a key-value store, best-effort.

What are the invariants?

- Deleting a recipe forgets it as a favorite in the same step.
- Ids never change once given out.
- Samples are never rebuilt from a form. Editing them is refused above the
  reducer, in the services, the reducer itself does not care.
"""
