"""
Shared pytest fixtures — temp upload dir, in-memory SQLite, fake model provider, TestClient.
"""
import json
import os
import shutil
import tempfile

# Must be set before the app modules read them at import time
_UPLOAD_DIR = tempfile.mkdtemp(prefix="receipt-uploads-")
os.environ["UPLOAD_DIR"] = _UPLOAD_DIR
os.environ["RATE_LIMIT_ENABLED"] = "0"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from receipt_extractor.database import Base, get_db  # noqa: E402
from receipt_extractor.main import app  # noqa: E402
from receipt_extractor.receipt.base import ProviderError  # noqa: E402
from receipt_extractor.receipt.factory import get_completion_provider  # noqa: E402
from receipt_extractor.uploads import UploadedFile  # noqa: E402

# StaticPool ensures all connections share the same in-memory database
_ENGINE = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
_Session = sessionmaker(autocommit=False, autoflush=False, bind=_ENGINE)

VALID_AI_RESPONSE = {
    "date": "2023-12-01",
    "currency": "usd",
    "vendor_name": "Test Store",
    "receipt_items": [{"item_name": "Test Item", "item_cost": 10.99}],
    "tax": 1.10,
    "total": 12.09,
}

# Not a decodable image; the pipeline never inspects pixels
JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00fake receipt image\xff\xd9"


class FakeProvider:
    """Deterministic stand-in for the remote model."""

    def __init__(self, content=None, error: Exception | None = None):
        self.content = content
        self.error = error
        self.calls: list = []

    @classmethod
    def returning_json(cls, payload):
        return cls(content=json.dumps(payload))

    async def complete(self, messages):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return self.content


@pytest.fixture(scope="session", autouse=True)
def _remove_upload_dir():
    yield
    shutil.rmtree(_UPLOAD_DIR, ignore_errors=True)


@pytest.fixture()
def upload_dir():
    return _UPLOAD_DIR


@pytest.fixture(autouse=True)
def _reset_state():
    Base.metadata.create_all(bind=_ENGINE)
    yield
    Base.metadata.drop_all(bind=_ENGINE)
    for name in os.listdir(_UPLOAD_DIR):
        os.remove(os.path.join(_UPLOAD_DIR, name))


@pytest.fixture()
def db():
    session = _Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def provider():
    return FakeProvider.returning_json(VALID_AI_RESPONSE)


@pytest.fixture()
def make_upload(tmp_path):
    def _make(
        content_type="image/jpeg",
        original_filename="test-receipt.jpg",
        filename="test-uuid.jpg",
        data=JPEG_BYTES,
    ) -> UploadedFile:
        path = tmp_path / filename
        path.write_bytes(data)
        return UploadedFile(
            original_filename=original_filename,
            content_type=content_type,
            filename=filename,
            path=str(path),
            size=len(data),
        )
    return _make


@pytest.fixture()
def client(db, provider):
    def _override_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = _override_db
    app.dependency_overrides[get_completion_provider] = lambda: provider
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
