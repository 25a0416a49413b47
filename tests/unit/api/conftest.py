"""Fixtures for API tests.

The bootstrap singletons are pointed at an in-memory store and a fake
clock before the app starts, and reset afterwards.
"""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from src.bootstrap.chest_services import (
    reset_chest_services,
    set_chest_config,
    set_document_store,
    set_time_authority,
)
from src.config.chest_config import ChestConfig
from src.infrastructure.stubs.document_store_stub import InMemoryDocumentStore
from tests.helpers.fake_time_authority import FakeTimeAuthority


@pytest.fixture
def client(fake_time: FakeTimeAuthority) -> Iterator[TestClient]:
    from src.api.main import app

    reset_chest_services()
    set_document_store(InMemoryDocumentStore())
    set_time_authority(fake_time)
    set_chest_config(ChestConfig())
    with TestClient(app) as test_client:
        yield test_client
    reset_chest_services()


@pytest.fixture
def register(client: TestClient):
    def _register(username: str, gender: str) -> dict:
        response = client.post(
            "/v1/identities", json={"username": username, "gender": gender}
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _register


@pytest.fixture
def paired(client: TestClient, register) -> tuple[dict, dict]:
    alice = register("alice", "female")
    bob = register("bob", "male")
    response = client.post(
        "/v1/pairings", json={"requester_id": alice["id"], "partner_username": "bob"}
    )
    assert response.status_code == 201, response.text
    return alice, bob
