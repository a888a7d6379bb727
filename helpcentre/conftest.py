"""Shared pytest fixtures for the content store."""

import pytest

from helpcentre.app import create_app
from helpcentre.settings import Settings
from helpcentre.store import ContentStore

ADMIN_TOKEN = "test-token"


@pytest.fixture
def content_root(tmp_path):
    """An empty content root."""
    root = tmp_path / "data"
    root.mkdir()
    return root


@pytest.fixture
def store(content_root):
    return ContentStore(content_root)


@pytest.fixture
def group(store):
    """The UK and Ireland group."""
    folder, _ = store.groups.create(
        {
            "id": "uki",
            "name": "UK & Ireland",
            "countries": [
                {"code": "gb", "name": "United Kingdom", "currency": "GBP"},
                {"code": "ie", "name": "Ireland", "currency": "EUR"},
            ],
        }
    )
    return folder


@pytest.fixture
def other_group(store):
    """A second group owning the US."""
    folder, _ = store.groups.create(
        {"id": "na", "name": "North America", "countries": [{"code": "us", "currency": "USD"}]}
    )
    return folder


@pytest.fixture
def product(store, group):
    """A cloud product with three topics: a, b and c."""
    folder, config = store.products.create(group, {"id": "Accounts Cloud", "name": "Accounts"})
    store.topics.reconcile(
        group,
        folder,
        [
            {"id": "a", "title": "Topic A", "productId": config["id"]},
            {"id": "b", "title": "Topic B", "description": "About B", "productId": config["id"]},
            {"id": "c", "title": "Topic C", "productId": config["id"]},
        ],
    )
    return folder


@pytest.fixture
def app(content_root):
    settings = Settings(content_root=content_root, admin_token=ADMIN_TOKEN)
    app = create_app(settings)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_store(app):
    """The store behind the test app, for seeding data."""
    return app.extensions["helpcentre"]


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}
