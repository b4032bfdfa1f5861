"""
Shared fixtures for the recipe catalog tests.

Storage tests run against both backends: the in-memory store and the
SQLAlchemy store on an in-memory SQLite database.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable

import pytest
from fastapi.testclient import TestClient

from cookbook.db import create_db_engine
from cookbook.models import RecipeCreate
from cookbook.seed import SAMPLE_RECIPES
from cookbook.storage import MemoryRecipeStorage, RecipeStorage, SqlRecipeStorage

BACKEND_KINDS = ["memory", "sqlite"]


class FakeClock:
    """Deterministic clock: every call is one second after the previous one."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc),
                 step: timedelta = timedelta(seconds=1)):
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + self.step
        return current


def build_storage(kind: str, clock: Callable[[], datetime]) -> RecipeStorage:
    if kind == "memory":
        return MemoryRecipeStorage(clock=clock)
    return SqlRecipeStorage(create_db_engine("sqlite://"), clock=clock)


def make_recipe(**overrides) -> RecipeCreate:
    """A valid RecipeCreate; any field can be overridden."""
    data = {
        "name": "Test Pancakes",
        "description": "Fluffy pancakes for a lazy Sunday morning.",
        "ingredients": ["200g flour", "2 eggs", "300ml milk"],
        "instructions": ["Whisk everything together.", "Fry in a hot pan."],
        "image_url": "https://example.com/pancakes.jpg",
        "prep_time": 10,
        "cook_time": 15,
        "servings": 4,
        "tags": ["Breakfast", "Vegetarian"],
    }
    data.update(overrides)
    return RecipeCreate(**data)


@pytest.fixture(autouse=True)
def event_log(tmp_path, monkeypatch):
    """Send the JSONL event log to a temporary file for every test."""
    path = tmp_path / "events.log"
    monkeypatch.setenv("EVENT_LOG_FILE", str(path))
    return path


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(params=BACKEND_KINDS)
def storage(request, clock):
    """An empty store of each backend kind."""
    store = build_storage(request.param, clock)
    yield store
    store.close()


@pytest.fixture
def storage_factory():
    """Build extra stores (e.g. with a custom clock); closed after the test."""
    created = []

    def factory(kind: str, clock: Callable[[], datetime]) -> RecipeStorage:
        store = build_storage(kind, clock)
        created.append(store)
        return store

    yield factory
    for store in created:
        store.close()


@pytest.fixture
def seeded_storage(storage):
    storage.seed(SAMPLE_RECIPES)
    return storage


@pytest.fixture
def client(clock):
    """TestClient for an app serving a seeded in-memory store."""
    from api.main import create_app

    app = create_app(storage=MemoryRecipeStorage(clock=clock), seed=True)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def recipe_factory():
    """Callable building valid RecipeCreate payloads (see make_recipe)."""
    return make_recipe
