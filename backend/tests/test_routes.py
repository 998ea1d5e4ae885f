"""Integration tests for the relay HTTP surface.

Tests cover:
- GET / liveness and GET /health
- POST /generate/recreator and /generate/poses status codes and bodies
- POST /wavespeed/callback acknowledgment semantics
"""

import pytest

RECREATOR = "Pinterest Recreator"
POSES = "Pose Variations"


@pytest.mark.asyncio
class TestLiveness:
    async def test_root_returns_plain_ok(self, test_client):
        response = await test_client.get("/")

        assert response.status_code == 200
        assert response.text == "OK"
        assert response.headers["content-type"].startswith("text/plain")

    async def test_health_reports_no_missing_config(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "missing_config": []}


@pytest.mark.asyncio
class TestGenerateEndpoints:
    """Test POST /generate/{recreator,poses}."""

    @pytest.mark.parametrize("path", ["/generate/recreator", "/generate/poses"])
    @pytest.mark.parametrize("body", [{}, {"recordId": ""}, {"recordId": None}, {"other": "x"}])
    async def test_missing_record_id_returns_400(self, test_client, events, path, body):
        response = await test_client.post(path, json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "recordId required"}
        assert events == []

    async def test_malformed_json_returns_400(self, test_client, events):
        response = await test_client.post(
            "/generate/recreator",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "recordId required"}
        assert events == []

    async def test_recreator_success(self, test_client, fake_store, fake_provider):
        fake_store.add(RECREATOR, "rec1", {"Prompt": "city at night"})

        response = await test_client.post("/generate/recreator", json={"recordId": "rec1"})

        assert response.status_code == 200
        assert response.json() == {
            "ok": True,
            "job": {"job_id": "job_1", "batch_id": "batch_1", "status": "queued"},
        }
        assert fake_provider.payloads[0]["prompt"] == "city at night"
        assert fake_store.fields(RECREATOR, "rec1")["Wavespeed Job ID"] == "job_1"

    async def test_poses_scenario(self, test_client, fake_store, fake_provider):
        fake_store.add(POSES, "rec123", {"Poses": "A\nB\n\nC"})

        response = await test_client.post("/generate/poses", json={"recordId": "rec123"})

        assert response.status_code == 200
        payload = fake_provider.payloads[0]
        assert payload["poses"] == ["A", "B", "C"]
        assert payload["metadata"] == {
            "airtable_record_id": "rec123",
            "table": POSES,
            "mode": "pose_variations",
        }

    async def test_unknown_record_returns_500(self, test_client):
        response = await test_client.post("/generate/poses", json={"recordId": "recNope"})

        assert response.status_code == 500
        assert response.json() == {"error": "Airtable getRecord failed: 404"}

    async def test_provider_failure_returns_500_with_body_text(
        self, test_client, fake_store, fake_provider, provider_down
    ):
        fake_store.add(RECREATOR, "rec1", {})
        fake_provider.error = provider_down

        response = await test_client.post("/generate/recreator", json={"recordId": "rec1"})

        assert response.status_code == 500
        assert response.json() == {
            "error": 'Wavespeed createJob failed: 503 {"message":"overloaded"}'
        }
        # No rollback: record stays running
        assert fake_store.fields(RECREATOR, "rec1")["Status"] == "running"

    async def test_unexpected_exception_returns_500(self, test_client, fake_store):
        fake_store.get_error = RuntimeError("connection reset")

        response = await test_client.post("/generate/recreator", json={"recordId": "rec1"})

        assert response.status_code == 500
        assert response.json() == {"error": "connection reset"}


@pytest.mark.asyncio
class TestWavespeedCallback:
    """Test POST /wavespeed/callback."""

    async def test_succeeded_marks_record_done(self, test_client, fake_store):
        fake_store.add(RECREATOR, "rec1", {"Status": "running", "Error Message": "old"})

        response = await test_client.post(
            "/wavespeed/callback",
            json={
                "status": "succeeded",
                "images": [{"url": "https://cdn/a.png"}, {"url": "https://cdn/b.png"}],
                "metadata": {"airtable_record_id": "rec1", "table": RECREATOR, "mode": "recreate"},
            },
        )

        assert response.status_code == 200
        assert response.json() == {"ok": True}
        fields = fake_store.fields(RECREATOR, "rec1")
        assert fields["Status"] == "done"
        assert fields["Output Images"] == [
            {"url": "https://cdn/a.png"},
            {"url": "https://cdn/b.png"},
        ]
        assert fields["Error Message"] == ""

    async def test_non_string_mode_is_echoed_without_failing(self, test_client, fake_store):
        fake_store.add(RECREATOR, "rec1", {"Status": "running"})

        response = await test_client.post(
            "/wavespeed/callback",
            json={
                "status": "succeeded",
                "metadata": {"airtable_record_id": "rec1", "table": RECREATOR, "mode": {"v": 2}},
            },
        )

        assert response.status_code == 200
        assert response.json() == {"ok": True}
        assert fake_store.fields(RECREATOR, "rec1")["Status"] == "done"

    async def test_failed_without_error_uses_fallback(self, test_client, fake_store):
        fake_store.add(POSES, "rec2", {"Status": "running"})

        response = await test_client.post(
            "/wavespeed/callback",
            json={"status": "failed", "metadata": {"airtable_record_id": "rec2", "table": POSES}},
        )

        assert response.json() == {"ok": True}
        fields = fake_store.fields(POSES, "rec2")
        assert fields["Status"] == "error"
        assert fields["Error Message"] == "Unknown Wavespeed error"

    @pytest.mark.parametrize("status", ["running", "queued"])
    async def test_unrecognized_status_is_acknowledged_without_writes(
        self, test_client, fake_store, events, status
    ):
        fake_store.add(RECREATOR, "rec1", {"Status": "running"})

        response = await test_client.post(
            "/wavespeed/callback",
            json={"status": status, "metadata": {"airtable_record_id": "rec1", "table": RECREATOR}},
        )

        assert response.status_code == 200
        assert response.json() == {"ok": True}
        assert events == []
        assert fake_store.fields(RECREATOR, "rec1") == {"Status": "running"}

    async def test_missing_record_id_is_acknowledged_without_writes(self, test_client, events):
        response = await test_client.post(
            "/wavespeed/callback",
            json={"status": "succeeded", "metadata": {"table": RECREATOR}},
        )

        assert response.status_code == 200
        assert response.json() == {"ok": True}
        assert events == []

    async def test_empty_body_is_acknowledged(self, test_client, events):
        response = await test_client.post("/wavespeed/callback")

        assert response.status_code == 200
        assert response.json() == {"ok": True}
        assert events == []

    async def test_store_failure_still_acknowledged(self, test_client, fake_store):
        fake_store.fail_on_fields = {"Status"}

        response = await test_client.post(
            "/wavespeed/callback",
            json={"status": "failed", "metadata": {"airtable_record_id": "rec1", "table": POSES}},
        )

        assert response.status_code == 200
        assert response.json() == {"ok": True}

    async def test_unparseable_metadata_returns_500(self, test_client, events):
        response = await test_client.post(
            "/wavespeed/callback",
            json={"status": "succeeded", "metadata": "rec1"},
        )

        assert response.status_code == 500
        assert "error" in response.json()
        assert events == []
