from pathlib import Path
import re
from typing import Iterator

import pytest
from starlette.testclient import TestClient

from app.app import create_app
import config
from db import MemoryKeyValueStore
from domain.models import DEFAULT_IMAGE, Owner


@pytest.fixture
def backend() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def client(backend: MemoryKeyValueStore, tmp_path: Path) -> Iterator[TestClient]:
    cfg = config.Config(uploads_dir=tmp_path / "uploads")
    with TestClient(create_app(cfg, backend=backend)) as client:
        yield client


def samples(client: TestClient):
    return client.app.state.store.state.recipes  # pyright: ignore[reportAttributeAccessIssue, reportUnknownMemberType]


def new_recipe_id(client: TestClient, **fields: str) -> str:
    resp = client.post("/recipes/new", data=fields, follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/my-food"
    return samples(client)[0].id


def test_healthz(client: TestClient) -> None:
    assert client.get("/healthz").text == "ok"


def test_feed_lists_samples(client: TestClient) -> None:
    resp = client.get("/")
    assert resp.status_code == 200
    for title in ("Avocado Toast", "Classic Caesar Salad", "Spaghetti Bolognese"):
        assert title in resp.text


def test_feed_filters_by_category(client: TestClient) -> None:
    resp = client.get("/", params={"category": "Salads"})
    assert "Classic Caesar Salad" in resp.text
    assert "Avocado Toast" not in resp.text
    assert "Salads Recipes" in resp.text


def test_my_food_category_redirects(client: TestClient) -> None:
    resp = client.get("/", params={"category": "My Food"}, follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/my-food"


def test_add_recipe_shows_in_my_food(client: TestClient) -> None:
    id = new_recipe_id(
        client,
        title="Pancakes",
        category="Breakfast",
        ingredients="flour\n\nmilk \n",
        servings="abc",
    )
    recipe = samples(client)[0]
    assert recipe.title == "Pancakes"
    assert recipe.ingredients == ("flour", "milk")
    assert recipe.servings == 1
    assert recipe.image == DEFAULT_IMAGE
    assert recipe.owner is Owner.USER

    resp = client.get("/my-food")
    assert "Pancakes" in resp.text
    assert "Avocado Toast" not in resp.text
    assert f"/recipes/{id}/edit" in resp.text


def test_blank_title_is_rejected(client: TestClient) -> None:
    before = samples(client)
    resp = client.post("/recipes/new", data={"title": "  "})
    assert resp.status_code == 400
    assert "Please enter a recipe name." in resp.text
    assert samples(client) == before


def test_uploaded_image_is_used(client: TestClient, tmp_path: Path) -> None:
    resp = client.post(
        "/recipes/new",
        data={"title": "Brownies"},
        files={"image-file": ("brownies.jpeg", b"not really a jpeg", "image/jpeg")},
        follow_redirects=False,
    )
    assert resp.status_code == 303
    recipe = samples(client)[0]
    saved = list((tmp_path / "uploads").iterdir())
    assert len(saved) == 1
    assert saved[0].suffix == ".jpeg"
    assert recipe.image == saved[0].as_uri()


def test_detail_page(client: TestClient) -> None:
    sample = samples(client)[0]
    resp = client.get(f"/recipes/{sample.id}")
    assert resp.status_code == 200
    assert sample.title in resp.text
    assert "<p>Toast bread." in resp.text
    assert f"/recipes/{sample.id}/edit" not in resp.text
    assert f"/recipes/{sample.id}/delete" not in resp.text


def test_detail_unknown_recipe(client: TestClient) -> None:
    resp = client.get("/recipes/does-not-exist")
    assert resp.status_code == 404
    assert "Recipe not found" in resp.text


def test_toggle_favorite(client: TestClient) -> None:
    sample = samples(client)[1]
    resp = client.post(
        f"/recipes/{sample.id}/favorite",
        data={"next": "/favorites"},
        follow_redirects=False,
    )
    assert resp.status_code == 303
    assert resp.headers["location"] == "/favorites"
    assert sample.title in client.get("/favorites").text

    client.post(f"/recipes/{sample.id}/favorite")
    assert sample.title not in client.get("/favorites").text


def test_favorite_ignores_external_next(client: TestClient) -> None:
    sample = samples(client)[0]
    resp = client.post(
        f"/recipes/{sample.id}/favorite",
        data={"next": "//evil.example.com"},
        follow_redirects=False,
    )
    assert resp.headers["location"] == f"/recipes/{sample.id}"


def test_edit_recipe(client: TestClient) -> None:
    id = new_recipe_id(client, title="Chili", servings="4")
    resp = client.get(f"/recipes/{id}/edit")
    assert resp.status_code == 200
    assert 'value="Chili"' in resp.text

    resp = client.post(
        f"/recipes/{id}/edit",
        data={"title": "Smoky Chili", "servings": "6"},
        follow_redirects=False,
    )
    assert resp.status_code == 303
    recipe = samples(client)[0]
    assert recipe.id == id
    assert recipe.title == "Smoky Chili"
    assert recipe.servings == 6


def test_samples_cannot_be_edited_or_deleted(client: TestClient) -> None:
    sample = samples(client)[0]
    assert client.get(f"/recipes/{sample.id}/edit").status_code == 403
    assert client.post(f"/recipes/{sample.id}/edit", data={"title": "x"}).status_code == 403
    assert client.get(f"/recipes/{sample.id}/delete").status_code == 403
    assert client.post(f"/recipes/{sample.id}/delete").status_code == 403
    assert samples(client)[0] == sample


def test_delete_needs_confirmation(client: TestClient) -> None:
    id = new_recipe_id(client, title="Stew")
    client.post(f"/recipes/{id}/favorite")

    resp = client.get(f"/recipes/{id}/delete")
    assert resp.status_code == 200
    assert "This cannot be undone." in resp.text
    assert samples(client)[0].id == id

    resp = client.post(f"/recipes/{id}/delete", follow_redirects=False)
    assert resp.status_code == 303
    assert all(r.id != id for r in samples(client))
    assert client.app.state.store.state.favorites == frozenset()  # pyright: ignore[reportAttributeAccessIssue, reportUnknownMemberType]


def test_state_survives_restart(backend: MemoryKeyValueStore, tmp_path: Path) -> None:
    cfg = config.Config(uploads_dir=tmp_path / "uploads")
    with TestClient(create_app(cfg, backend=backend)) as client:
        id = new_recipe_id(client, title="Curry")
        client.post(f"/recipes/{id}/favorite")
        ids = [r.id for r in samples(client)]

    with TestClient(create_app(cfg, backend=backend)) as client:
        assert [r.id for r in samples(client)] == ids
        resp = client.get("/favorites")
        assert re.search(r"Curry", resp.text)


@pytest.mark.parametrize(
    "filename,content_type",
    (
        ("evil.html", "text/html"),
        ("evil.html", "image/png"),
        ("evil.svg", "image/svg+xml"),
        ("photo.jpeg", "text/plain"),
    ),
)
def test_non_image_upload_falls_back_to_placeholder(
    client: TestClient, tmp_path: Path, filename: str, content_type: str
) -> None:
    resp = client.post(
        "/recipes/new",
        data={"title": "Brownies"},
        files={"image-file": (filename, b"<script>alert(1)</script>", content_type)},
        follow_redirects=False,
    )
    assert resp.status_code == 303
    assert samples(client)[0].image == DEFAULT_IMAGE
    uploads = tmp_path / "uploads"
    assert not uploads.exists() or not any(uploads.iterdir())
