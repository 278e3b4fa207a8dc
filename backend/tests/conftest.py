"""
Shared fixtures: every test gets its own data, upload and public directories.
"""
import pytest
from fastapi.testclient import TestClient

from hengstudio.config import Settings
from hengstudio.main import create_app
from hengstudio.models.gallery import GalleryEntry
from hengstudio.storage.gallery_store import GalleryManifestStore
from hengstudio.storage.project_store import ProjectStore

ADMIN_TOKEN = "test-admin-secret"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        admin_token=ADMIN_TOKEN,
        data_dir=tmp_path / "data",
        upload_dir=tmp_path / "uploads",
        public_dir=tmp_path / "public",
        max_upload_bytes=64 * 1024,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers():
    return {"X-Admin-Token": ADMIN_TOKEN}


@pytest.fixture
def project_store(tmp_path):
    return ProjectStore(tmp_path / "data" / "projects.json", tmp_path / "data" / "backups")


@pytest.fixture
def valid_payload():
    return {"title": "A", "category": "Fashion", "imageUrl": "https://x/y.jpg"}


def make_entries(count):
    return [
        GalleryEntry(name=f"{i:03d}.jpg", url=f"/images/gallery/{i:03d}.jpg", number=i)
        for i in range(1, count + 1)
    ]


@pytest.fixture
def manifest_store(tmp_path):
    store = GalleryManifestStore(tmp_path / "public" / "gallery.json")
    store.save(make_entries(5))
    return store
