from jinja2 import Environment
from markupsafe import Markup

from domain.models import Recipe


class RecipeDetail:
    def __init__(
        self,
        recipe: Recipe,
        *,
        favorite: bool,
        environment: Environment,
        template_name: str = "recipe-detail.html",
    ) -> None:
        self.recipe = recipe
        self.favorite = favorite
        self.env = environment
        self.name = template_name

    @property
    def title(self) -> str:
        return self.recipe.title

    @property
    def content(self) -> str:
        return Markup(self.recipe.html)

    @property
    def editable(self) -> bool:
        return not self.recipe.is_sample

    def render(self) -> str:
        return self.env.get_template(self.name).render(recipe=self)
