import contextlib
import functools
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable
import uuid

from databases import Database
from jinja2 import Environment, FileSystemLoader, select_autoescape
from rich.logging import RichHandler
from starlette.applications import Starlette
from starlette.datastructures import UploadFile
from starlette.requests import Request
from starlette.responses import HTMLResponse, PlainTextResponse, RedirectResponse
from starlette.routing import Mount, Route
from starlette.staticfiles import StaticFiles

import config
import db
from app.html.recipe_detail import RecipeDetail
from domain.builder import RecipeForm
from domain.errors import ReadOnlyRecipe, RecipeNotFound, RecipeValidationError
from domain.models import CATEGORIES
from domain.repository import KeyValueBackend, SnapshotRepository
from domain.services import (
    ALL,
    create_recipe,
    delete_recipe,
    edit_recipe,
    editable_recipe,
    favorite_recipes,
    get_recipe,
    my_recipes,
    recipes_in_category,
    toggle_favorite,
)
from domain.store import RecipeStore


logger = logging.getLogger(__name__)


CONFIG = config.Config()


FORM_FIELDS = (
    "title",
    "category",
    "image",
    "ingredients",
    "instructions",
    "prep_time",
    "servings",
    "calories",
    "difficulty",
)


IMAGE_SUFFIXES = (".jpg", ".jpeg", ".png", ".gif", ".webp")


def configure_logging(cfg: config.Config) -> None:
    logging.basicConfig(
        level=cfg.log_level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=cfg.env == config.Env.local)],
    )


def aHTMLResponse(route: Callable[..., Awaitable[str | tuple[str, int]]]):
    @functools.wraps(route)
    async def wrapper(*args: Any, **kwargs: Any) -> HTMLResponse:
        resp = await route(*args, **kwargs)
        if not isinstance(resp, tuple):
            html, code = resp, 200
        else:
            html, code = resp
        return HTMLResponse(html, status_code=code)

    return wrapper


def render(request: Request, template: str, **context: Any) -> str:
    templates: Environment = request.app.state.templates
    return templates.get_template(template).render(**context)


def store_of(request: Request) -> RecipeStore:
    return request.app.state.store


async def save_upload(upload: UploadFile, cfg: config.Config) -> str:
    """Store a picked image and return the URI it is served from.

    An empty string means nothing usable was saved; the recipe then gets the
    placeholder image.
    """
    ext = Path(upload.filename).suffix.lower() if upload.filename else ".jpeg"
    content_type = upload.content_type or ""
    if not content_type.startswith("image/") or ext not in IMAGE_SUFFIXES:
        logger.warning("Ignoring upload %s of type %s.", upload.filename, content_type)
        return ""
    path = cfg.uploads_dir / f"{uuid.uuid4().hex}{ext}"
    try:
        contents = await upload.read()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as f:
            f.write(contents)
    except OSError:
        logger.exception("Could not save uploaded image %s.", upload.filename)
        return ""
    try:
        return "/assets/" + path.relative_to(cfg.assets_dir).as_posix()
    except ValueError:
        return path.as_uri()


async def read_recipe_form(request: Request) -> RecipeForm:
    cfg: config.Config = request.app.state.config
    async with request.form() as form:
        fields = {name: str(form.get(name) or "") for name in FORM_FIELDS}
        upload = form.get("image-file")
        if isinstance(upload, UploadFile) and upload.size:
            fields["image"] = await save_upload(upload, cfg) or fields["image"]
    return RecipeForm(**fields)


def safe_next(value: Any, default: str) -> str:
    if isinstance(value, str) and value.startswith("/") and not value.startswith("//"):
        return value
    return default


async def feed(request: Request) -> HTMLResponse | RedirectResponse:
    category = request.query_params.get("category") or ALL
    if category == "My Food":
        return RedirectResponse("/my-food", status_code=303)
    state = store_of(request).state
    return HTMLResponse(
        render(
            request,
            "feed.html",
            categories=(ALL, *CATEGORIES),
            category=category,
            recipes=recipes_in_category(state, category),
            favorites=state.favorites,
        )
    )


@aHTMLResponse
async def favorites(request: Request) -> str:
    state = store_of(request).state
    return render(
        request,
        "favorites.html",
        recipes=favorite_recipes(state),
        favorites=state.favorites,
    )


@aHTMLResponse
async def my_food(request: Request) -> str:
    state = store_of(request).state
    return render(
        request,
        "my-food.html",
        recipes=my_recipes(state),
        favorites=state.favorites,
    )


@aHTMLResponse
async def recipe_detail(request: Request) -> str:
    state = store_of(request).state
    recipe = get_recipe(state, request.path_params["id"])
    return RecipeDetail(
        recipe,
        favorite=state.is_favorite(recipe.id),
        environment=request.app.state.templates,
    ).render()


def editor(
    request: Request,
    form: RecipeForm,
    *,
    action: str,
    heading: str,
    error: str | None = None,
) -> str:
    return render(
        request,
        "editor.html",
        form=form,
        action=action,
        heading=heading,
        error=error,
        categories=[c for c in CATEGORIES if c != "My Food"],
    )


async def new_recipe(request: Request) -> HTMLResponse | RedirectResponse:
    match request.method.lower():
        case "get":
            return HTMLResponse(
                editor(request, RecipeForm(), action="/recipes/new", heading="Add New Recipe")
            )
        case "post":
            form = await read_recipe_form(request)
            try:
                create_recipe(form, store=store_of(request))
            except RecipeValidationError as e:
                html = editor(
                    request,
                    form,
                    action="/recipes/new",
                    heading="Add New Recipe",
                    error=e.message,
                )
                return HTMLResponse(html, status_code=400)
            return RedirectResponse("/my-food", status_code=303)
        case _:
            raise ValueError("Unsupported method.")


async def update_recipe(request: Request) -> HTMLResponse | RedirectResponse:
    store = store_of(request)
    id = request.path_params["id"]
    action = f"/recipes/{id}/edit"
    match request.method.lower():
        case "get":
            recipe = editable_recipe(store.state, id)
            form = RecipeForm.from_recipe(recipe)
            return HTMLResponse(editor(request, form, action=action, heading="Edit Recipe"))
        case "post":
            form = await read_recipe_form(request)
            try:
                edit_recipe(id, form, store=store)
            except RecipeValidationError as e:
                html = editor(
                    request, form, action=action, heading="Edit Recipe", error=e.message
                )
                return HTMLResponse(html, status_code=400)
            return RedirectResponse("/my-food", status_code=303)
        case _:
            raise ValueError("Unsupported method.")


async def remove_recipe(request: Request) -> HTMLResponse | RedirectResponse:
    store = store_of(request)
    id = request.path_params["id"]
    match request.method.lower():
        case "get":
            recipe = editable_recipe(store.state, id)
            return HTMLResponse(render(request, "confirm-delete.html", recipe=recipe))
        case "post":
            delete_recipe(id, store=store)
            return RedirectResponse("/my-food", status_code=303)
        case _:
            raise ValueError("Unsupported method.")


async def favorite(request: Request) -> RedirectResponse:
    id = request.path_params["id"]
    async with request.form() as form:
        next_url = safe_next(form.get("next"), f"/recipes/{id}")
    toggle_favorite(id, store=store_of(request))
    return RedirectResponse(next_url, status_code=303)


async def healthz(request: Request) -> PlainTextResponse:
    return PlainTextResponse("ok")


async def not_found(request: Request, exc: Exception) -> HTMLResponse:
    return HTMLResponse(
        render(request, "error.html", title="Recipe not found", message=str(exc)),
        status_code=404,
    )


async def read_only(request: Request, exc: Exception) -> HTMLResponse:
    return HTMLResponse(
        render(request, "error.html", title="Sample recipe", message=str(exc)),
        status_code=403,
    )


def create_app(
    cfg: config.Config | None = None,
    *,
    backend: KeyValueBackend | None = None,
) -> Starlette:
    cfg = CONFIG if cfg is None else cfg
    database = Database(cfg.db_url) if backend is None else None
    if database is not None:
        backend = db.KeyValueRepository(database)
    assert backend is not None

    store = RecipeStore(SnapshotRepository(backend, namespace=cfg.storage_namespace))

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette):
        if database is not None:
            await database.connect()
            await db.create_db(database)
        await store.startup()
        yield
        await store.flush()
        if database is not None:
            await database.disconnect()

    app = Starlette(
        debug=True if cfg.env == config.Env.local else False,
        routes=[
            Route("/", feed),
            Route("/favorites", favorites),
            Route("/my-food", my_food),
            Route("/recipes/new", new_recipe, methods=["GET", "POST"]),
            Route("/recipes/{id}", recipe_detail),
            Route("/recipes/{id}/edit", update_recipe, methods=["GET", "POST"]),
            Route("/recipes/{id}/delete", remove_recipe, methods=["GET", "POST"]),
            Route("/recipes/{id}/favorite", favorite, methods=["POST"]),
            Route("/healthz", healthz),
            Mount("/assets", StaticFiles(directory=cfg.assets_dir), name="assets"),
        ],
        exception_handlers={RecipeNotFound: not_found, ReadOnlyRecipe: read_only},
        lifespan=lifespan,
    )

    app.state.config = cfg
    app.state.store = store
    # Can always copy this, subclass BaseLoader, and make it do what I want.
    app.state.templates = Environment(
        loader=FileSystemLoader(cfg.html_dir),
        autoescape=select_autoescape(),
    )
    return app


configure_logging(CONFIG)
app = create_app()
