class FoodieError(Exception):
    pass


class RecipeValidationError(FoodieError):
    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class RecipeNotFound(FoodieError):
    def __init__(self, recipe_id: str) -> None:
        super().__init__(f"Recipe not found: {recipe_id}")
        self.recipe_id = recipe_id


class ReadOnlyRecipe(FoodieError):
    def __init__(self, recipe_id: str) -> None:
        super().__init__(f"Sample recipes cannot be changed: {recipe_id}")
        self.recipe_id = recipe_id


class StoreNotReady(FoodieError):
    pass
