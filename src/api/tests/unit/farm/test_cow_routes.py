"""Unit tests for cow routes with the repository replaced by a mock."""

from __future__ import annotations

from datetime import date, datetime, timezone
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from farm.infrastructure.cow_repository import (
    CowNotFoundError,
    DuplicateTagNumberError,
)
from farm.infrastructure.models import CowModel, HealthRecordModel
from farm.presentation import routes

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _cow(**overrides) -> CowModel:
    fields = dict(
        id="01HZZZZZZZZZZZZZZZZZZZZZZZ",
        name="Daisy",
        tag_number="TAG-1",
        breed="Holstein",
        date_of_birth=None,
        weight=None,
        status="healthy",
        notes=None,
        image_url=None,
        created_at=NOW,
        updated_at=NOW,
    )
    fields.update(overrides)
    return CowModel(**fields)


@pytest.fixture
def repository() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def client(repository) -> TestClient:
    app = FastAPI()
    app.include_router(routes.router)
    app.dependency_overrides[routes.get_cow_repository] = lambda: repository
    return TestClient(app)


class TestCows:
    def test_list(self, client, repository):
        repository.list_all.return_value = [_cow()]

        response = client.get("/cows")

        assert response.status_code == 200
        assert [c["tag_number"] for c in response.json()] == ["TAG-1"]

    def test_create(self, client, repository):
        repository.add.side_effect = lambda cow: _cow(
            name=cow.name, tag_number=cow.tag_number
        )

        response = client.post("/cows", json={"name": "Bella", "tag_number": "T2"})

        assert response.status_code == 201
        assert response.json()["tag_number"] == "T2"
        added = repository.add.await_args.args[0]
        assert isinstance(added, CowModel)
        assert added.status == "healthy"

    def test_create_duplicate_tag_returns_409(self, client, repository):
        repository.add.side_effect = DuplicateTagNumberError("TAG-1")

        response = client.post("/cows", json={"name": "Daisy", "tag_number": "TAG-1"})

        assert response.status_code == 409

    def test_create_validates_body(self, client, repository):
        response = client.post("/cows", json={"name": "", "tag_number": "x"})

        assert response.status_code == 422
        repository.add.assert_not_awaited()

    def test_get_missing_returns_404(self, client, repository):
        repository.get.return_value = None

        assert client.get("/cows/nope").status_code == 404

    def test_delete(self, client, repository):
        repository.delete.return_value = True

        assert client.delete("/cows/x").status_code == 204

    def test_delete_missing_returns_404(self, client, repository):
        repository.delete.return_value = False

        assert client.delete("/cows/x").status_code == 404


class TestHealthRecords:
    def test_list_for_missing_cow_returns_404(self, client, repository):
        repository.get.return_value = None

        assert client.get("/cows/x/health-records").status_code == 404
        repository.list_health_records.assert_not_awaited()

    def test_create(self, client, repository):
        def _persist(record: HealthRecordModel) -> HealthRecordModel:
            record.id = "01HYYYYYYYYYYYYYYYYYYYYYYY"
            return record

        repository.add_health_record.side_effect = _persist

        response = client.post(
            "/cows/c1/health-records",
            json={"record_date": "2026-03-01", "record_type": "vaccination"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["cow_id"] == "c1"
        assert body["record_date"] == "2026-03-01"
        record = repository.add_health_record.await_args.args[0]
        assert record.record_date == date(2026, 3, 1)

    def test_create_for_missing_cow_returns_404(self, client, repository):
        repository.add_health_record.side_effect = CowNotFoundError("c1")

        response = client.post(
            "/cows/c1/health-records",
            json={"record_date": "2026-03-01", "record_type": "checkup"},
        )

        assert response.status_code == 404
