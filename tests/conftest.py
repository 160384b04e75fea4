# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# Builds the app against in-memory SQLite and swaps the GCS client for an
# in-process fake bucket, so no cloud credentials are needed.
# =============================================================================

import io
import itertools
import os

# Must be set before create_app reads the environment
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("GCS_BUCKET_NAME", "test-bucket")
os.environ.setdefault("CLOUD_RUN_SERVICE_URL", "https://cleanup.example.com")

import pytest
from google.api_core.exceptions import NotFound

import cloud_storage
from app import create_app
from db import db


BUCKET_URL = "https://storage.googleapis.com/test-bucket/"


# =============================================================================
# Fake Google Cloud Storage
# =============================================================================

class FakeBlob:
    def __init__(self, bucket, name):
        self.bucket = bucket
        self.name = name

    def upload_from_file(self, file_obj, content_type = None):
        self.bucket.upload_attempts += 1
        if self.bucket.fail_on_upload == self.bucket.upload_attempts:
            raise RuntimeError("GCS unavailable")
        self.bucket.objects[self.name] = (file_obj.read(), content_type)

    def delete(self):
        if self.name not in self.bucket.objects:
            raise NotFound(f"No such object: {self.name}")
        del self.bucket.objects[self.name]
        self.bucket.deleted.append(self.name)


class FakeBucket:
    def __init__(self):
        self.objects = {}
        self.deleted = []
        self.upload_attempts = 0
        # 1-based upload attempt that should fail, None for never
        self.fail_on_upload = None

    def blob(self, name):
        return FakeBlob(self, name)

    def urls(self):
        return {BUCKET_URL + name for name in self.objects}


class FakeStorageClient:
    def __init__(self, bucket):
        self._bucket = bucket

    def bucket(self, name):
        assert name == "test-bucket"
        return self._bucket


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def bucket(monkeypatch):
    fake = FakeBucket()
    monkeypatch.setattr(cloud_storage.storage, "Client", lambda: FakeStorageClient(fake))
    return fake


@pytest.fixture
def app(bucket):
    app = create_app("sqlite://")
    app.config.update(TESTING = True)

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


_emails = itertools.count(1)


@pytest.fixture
def make_user(client):
    """Registers and logs in a user, returning (auth headers, user dict)."""
    def _make(role = "model", name = "Test User", email = None, password = "secret123"):
        email = email or f"user{next(_emails)}@example.com"
        resp = client.post(
            "/api/auth/register",
            json = {"name": name, "email": email, "password": password, "role": role}
        )
        assert resp.status_code == 201, resp.json
        return login(client, email, password)

    return _make


@pytest.fixture
def admin(app, client):
    runner = app.test_cli_runner()
    result = runner.invoke(args = ["create-admin", "Admin", "admin@example.com", "--password", "adminpass"])
    assert result.exit_code == 0, result.output
    return login(client, "admin@example.com", "adminpass")


@pytest.fixture
def create_profile(client):
    """Posts a profile for the given user with a main image and `gallery` extra images."""
    def _create(headers, gallery = 3, video = False, **fields):
        data = profile_form(gallery = gallery, **fields)
        if video:
            data["sampleVideo"] = video_file()
        return client.post("/api/models", data = data, headers = headers, content_type = "multipart/form-data")

    return _create


# =============================================================================
# Helpers
# =============================================================================

def login(client, email, password):
    resp = client.post("/api/auth/login", json = {"email": email, "password": password})
    assert resp.status_code == 200, resp.json
    return {"Authorization": f"Bearer {resp.json['token']}"}, resp.json["user"]


def image_file(name = "photo.jpg", content_type = "image/jpeg"):
    return (io.BytesIO(b"\xff\xd8\xff\xe0 fake jpeg bytes"), name, content_type)


def video_file(name = "reel.mp4", content_type = "video/mp4"):
    return (io.BytesIO(b"\x00\x00\x00\x18ftypmp42 fake video"), name, content_type)


def profile_form(gallery = 3, **fields):
    data = {
        "name": "Ada Lens",
        "gender": "female",
        "bio": "Editorial and runway model based in Lisbon.",
        "portfolio": "https://ada.example.com",
        "instagram_id": "@adalens",
        "mainImage": image_file("main.jpg"),
        "galleryImages": [image_file(f"gallery{i}.jpg") for i in range(gallery)],
    }
    data.update(fields)
    return data
