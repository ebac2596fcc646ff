"""
Shared fixtures.

FakeObjectStore implements the StorageClient protocol in memory and can
be told to fail or stall, which is all the catalog and service tests
need from a backend.
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from cleanfeed_dashboard.core.catalog import ObjectCatalog
from cleanfeed_dashboard.core.dashboard import DashboardService
from cleanfeed_dashboard.core.models import StoredObject
from cleanfeed_dashboard.infrastructure.forward_config.store import ConfigStore


BASE_TIME = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeObjectStore:
    """In-memory backend that records calls and can simulate failures."""

    def __init__(self, objects=None, bucket_name="test-bucket"):
        self.objects = list(objects or [])
        self.bucket_name = bucket_name
        self.list_error = None
        self.sign_error = None
        self.list_delay = 0.0
        self.list_calls = []
        self.sign_calls = []

    async def list_objects(self, prefix, max_keys):
        self.list_calls.append((prefix, max_keys))
        if self.list_delay:
            await asyncio.sleep(self.list_delay)
        if self.list_error is not None:
            raise self.list_error
        # Ignores max_keys and keeps insertion order so the catalog's own
        # sorting and capping are what the tests see
        return [obj for obj in self.objects if obj.key.startswith(prefix)]

    def get_presigned_url(self, key, expiry_seconds=3600):
        self.sign_calls.append((key, expiry_seconds))
        if self.sign_error is not None:
            raise self.sign_error
        return f"https://{self.bucket_name}.example.test/{key}?X-Amz-Expires={expiry_seconds}"


def make_object(key, minutes_ago=0, size_bytes=1024):
    return StoredObject(
        key=key,
        size_bytes=size_bytes,
        last_modified=BASE_TIME - timedelta(minutes=minutes_ago),
    )


@pytest.fixture
def fake_store() -> FakeObjectStore:
    """Backend with three recordings, listed oldest-first."""
    return FakeObjectStore([
        make_object("cleanfeed/2024-05-01-0900.mp4", minutes_ago=180),
        make_object("cleanfeed/2024-05-01-1200.mp4", minutes_ago=0),
        make_object("cleanfeed/2024-05-01-1100.mp4", minutes_ago=60),
        make_object("other/ignored.mp4", minutes_ago=5),
    ])


@pytest.fixture
def catalog(fake_store) -> ObjectCatalog:
    return ObjectCatalog(fake_store, list_timeout_seconds=1.0)


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "config" / "forward.env"


@pytest.fixture
def config_store(config_path) -> ConfigStore:
    return ConfigStore(config_path)


@pytest.fixture
def service(config_store, catalog) -> DashboardService:
    return DashboardService(config_store=config_store, catalog=catalog)


@pytest.fixture
def object_factory():
    """make_object, for tests that build their own listings."""
    return make_object


@pytest.fixture
def store_factory():
    """FakeObjectStore constructor, for tests that need a custom backend."""
    return FakeObjectStore
