"""pytest fixtures for Airwave relay tests.

Provides:
- settings: Fully populated test Settings
- events: Shared ordered log of remote calls made by the fakes
- fake_store / fake_provider: In-memory Airtable and Wavespeed stand-ins
- service: GenerationService wired to the fakes
- test_client: httpx AsyncClient bound to an app using the fake-backed service
"""

from typing import Any, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from airwave.app import create_app
from airwave.core.config import Settings
from airwave.models.job import JobCreated
from airwave.services.exceptions import ProviderUnavailable, StoreNotFound, StoreUnavailable
from airwave.services.generation import GenerationService


class FakeStore:
    """In-memory record store with Airtable's partial-update semantics."""

    def __init__(self, events: list):
        self.events = events
        self.records: dict[tuple[str, str], dict[str, Any]] = {}
        self.updates: list[tuple[str, str, dict[str, Any]]] = []
        self.get_error: Optional[Exception] = None
        # Raise on updates that write any of these field names
        self.fail_on_fields: set[str] = set()

    def add(self, table: str, record_id: str, fields: dict[str, Any]) -> None:
        self.records[(table, record_id)] = dict(fields)

    def fields(self, table: str, record_id: str) -> dict[str, Any]:
        return self.records[(table, record_id)]

    async def get_record(self, table: str, record_id: str) -> dict[str, Any]:
        self.events.append(("get", table, record_id))
        if self.get_error:
            raise self.get_error
        if (table, record_id) not in self.records:
            raise StoreNotFound("Airtable getRecord failed: 404", status_code=404)
        return dict(self.records[(table, record_id)])

    async def update_record(self, table: str, record_id: str, fields: dict[str, Any]):
        self.events.append(("update", table, record_id, dict(fields)))
        if self.fail_on_fields & set(fields):
            raise StoreUnavailable(
                'Airtable updateRecord failed: 422 {"error":"UNKNOWN_FIELD_NAME"}',
                status_code=422,
                body='{"error":"UNKNOWN_FIELD_NAME"}',
            )
        self.updates.append((table, record_id, dict(fields)))
        self.records.setdefault((table, record_id), {}).update(fields)
        return {"records": [{"id": record_id, "fields": fields}]}


class FakeProvider:
    """Wavespeed stand-in that records submitted payloads."""

    def __init__(self, events: list):
        self.events = events
        self.payloads: list[dict[str, Any]] = []
        self.response: Any = {"job_id": "job_1", "batch_id": "batch_1", "status": "queued"}
        self.error: Optional[Exception] = None

    async def create_job(self, payload: dict[str, Any]) -> JobCreated:
        self.events.append(("create_job", payload.get("metadata", {}).get("airtable_record_id")))
        self.payloads.append(payload)
        if self.error:
            raise self.error
        return JobCreated.from_response(self.response)


@pytest.fixture
def settings() -> Settings:
    """Settings with every required value populated."""
    return Settings(
        APP_ENV="test",
        PUBLIC_BASE_URL="https://relay.example.com",
        WAVESPEED_API_KEY="ws_test_key",
        AIRTABLE_TOKEN="pat_test_token",
        AIRTABLE_BASE_ID="appTestBase",
        AIRTABLE_TABLE_RECREATOR="Pinterest Recreator",
        AIRTABLE_TABLE_POSES="Pose Variations",
    )


@pytest.fixture
def events() -> list:
    return []


@pytest.fixture
def fake_store(events) -> FakeStore:
    return FakeStore(events)


@pytest.fixture
def fake_provider(events) -> FakeProvider:
    return FakeProvider(events)


@pytest.fixture
def provider_down() -> ProviderUnavailable:
    return ProviderUnavailable(
        'Wavespeed createJob failed: 503 {"message":"overloaded"}',
        status_code=503,
        body='{"message":"overloaded"}',
    )


@pytest.fixture
def service(settings, fake_store, fake_provider) -> GenerationService:
    return GenerationService(settings=settings, store=fake_store, provider=fake_provider)


@pytest_asyncio.fixture
async def test_client(settings, service):
    """Provide AsyncClient for testing API endpoints against the fakes."""
    app = create_app(settings)
    # Lifespan does not run under ASGITransport; inject the service directly
    app.state.generation_service = service

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
