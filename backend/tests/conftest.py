from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlmodel import create_engine
from sqlmodel.pool import StaticPool

from readinglist.main import create_app
from readinglist.modules.metadata import ArticleMetadata
from readinglist.routers.common import get_extractor
from readinglist.store import ArticleStore

DATA_DIR = Path(__file__).parent / "data"


class FakeExtractor:
    """Stands in for the network extractor, remembers the URLs it was asked for."""

    def __init__(self, metadata: ArticleMetadata | None = None):
        if metadata is None:
            metadata = ArticleMetadata(
                title="Test article",
                description="Test description",
                image_url="https://example.com/image.png",
            )
        self.metadata = metadata
        self.calls: list[str] = []

    async def __call__(self, url: str) -> ArticleMetadata:
        self.calls.append(url)
        return self.metadata


@pytest.fixture
def data_dir():
    return DATA_DIR


@pytest.fixture(scope="function")
def store():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    store = ArticleStore(engine)
    store.create_tables()
    yield store


@pytest.fixture
def extractor():
    return FakeExtractor()


@pytest.fixture
def app(store, extractor):
    app = create_app(store)
    app.dependency_overrides[get_extractor] = lambda: extractor
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def make_extractor():
    return FakeExtractor
