"""
Shared test fixtures.

Provides: a record store on a temporary SQLite file, collaborator test
doubles (identity, image registry, provisioner) and a RegistryContext
wiring them together.
"""

from unittest.mock import AsyncMock

import pytest

from topology_registry.context import RegistryContext
from topology_registry.policy import StaticDeploymentPolicy
from topology_registry.storage import RecordStore
from topology_registry.utils.kubernetes import WorkloadHandle
from topology_registry.utils.kvstore import KeyValueStore

OWNER_UUID = "930896af-bf8c-48d4-885c-6573a94b1853"
IMAGE_UUID = "fd2cc906-8938-11e3-beab-4359c665ac99"


def sqlite_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'registry.db'}"


@pytest.fixture
async def kv(tmp_path):
    """Key-value store on a fresh SQLite file."""
    store = KeyValueStore(sqlite_url(tmp_path))
    yield store
    await store.close()


@pytest.fixture
async def store(kv) -> RecordStore:
    """Record store with every bucket initialized."""
    record_store = RecordStore(kv)
    await record_store.init_buckets()
    return record_store


@pytest.fixture
def identity():
    """Identity client that knows every user."""
    client = AsyncMock()
    client.get_user = AsyncMock(return_value={"id": OWNER_UUID, "username": "admin"})
    return client


@pytest.fixture
def images():
    """Image registry that knows every image."""
    client = AsyncMock()
    client.get_image = AsyncMock(return_value={"uuid": IMAGE_UUID, "name": "base64", "version": "13.3.1"})
    return client


@pytest.fixture
def provisioner():
    """Provisioner that accepts every workload."""
    client = AsyncMock()
    client.create_workload = AsyncMock(
        side_effect=lambda params: WorkloadHandle(name=params["uuid"], namespace="topology", uid="pod-uid")
    )
    return client


@pytest.fixture
def ctx(store, identity, images, provisioner) -> RegistryContext:
    return RegistryContext(
        store=store,
        identity=identity,
        images=images,
        provisioner=provisioner,
        policy=StaticDeploymentPolicy(),
    )
