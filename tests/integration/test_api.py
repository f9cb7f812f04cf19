"""Integration tests for the HTTP API."""

import json

import pytest
from fastapi.testclient import TestClient

from contract_timeline.analysis.exceptions import CompletionTimeoutError, UpstreamError
from contract_timeline.analysis.fixtures import FIXTURE_FILENAME, sample_payload
from contract_timeline.api.app import create_app
from contract_timeline.config.models import AppConfig
from contract_timeline.storage.contract_store import ContractStore
from contract_timeline.storage.kv_storage import InMemoryKeyValueStorage

from tests.factories import FakeCompletionClient


MODEL_ANSWER = "```json\n" + json.dumps({
    "metadata": {"value": "$9,000", "effectiveDate": "2026-01-01", "parties": ["A", "B"]},
    "structure": [{"section": "Fees", "content": "Monthly fees."}],
    "timelineEvents": [
        {
            "title": "First Payment",
            "date": "2026-02-01",
            "type": "Payment",
            "risk": "High",
            "repercussion": "Suspension of services",
        }
    ],
}) + "\n```"


@pytest.fixture
def config():
    return AppConfig(stage_delay=0, allowed_extensions=(".pdf",))


@pytest.fixture
def store():
    return ContractStore(InMemoryKeyValueStorage())


def make_client(config, store, completion_client=None):
    app = create_app(config=config, store=store, completion_client=completion_client)
    return TestClient(app)


def upload_pdf(client, filename="services.pdf"):
    return client.post(
        "/api/contracts",
        files={"file": (filename, b"%PDF-1.4 not really", "application/pdf")},
    )


class TestAnalyzeEndpoint:
    """Tests for POST /api/analyze."""

    def test_success(self, config, store):
        completion = FakeCompletionClient(response=MODEL_ANSWER)
        client = make_client(config, store, completion)

        response = client.post(
            "/api/analyze",
            json={"fileContent": "Services agreement", "fileName": "services.pdf"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["metadata"]["value"] == "$9,000"
        assert body["data"]["timelineEvents"][0]["type"] == "Payment"
        assert "Services agreement" in completion.prompts[0]
        assert store.contracts == []

    def test_fixture_filename_needs_no_model(self, config, store):
        client = make_client(config, store)

        response = client.post(
            "/api/analyze", json={"fileContent": "", "fileName": FIXTURE_FILENAME}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["metadata"] == sample_payload()["metadata"]
        assert len(data["timelineEvents"]) == 5

    def test_timeout_returns_408(self, config, store):
        completion = FakeCompletionClient(
            error=CompletionTimeoutError(message="Request timed out", timeout=10.0)
        )
        client = make_client(config, store, completion)

        response = client.post("/api/analyze", json={"fileContent": "x", "fileName": "a.pdf"})

        assert response.status_code == 408
        assert response.json() == {
            "success": False,
            "error": "TIMEOUT",
            "message": "Request timed out after 10 seconds",
        }

    def test_missing_api_key_returns_500(self, config, store):
        client = make_client(config, store)

        response = client.post("/api/analyze", json={"fileContent": "x", "fileName": "a.pdf"})

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "API key not configured"}

    def test_upstream_error_message_is_passed_through(self, config, store):
        completion = FakeCompletionClient(error=UpstreamError(message="quota exceeded"))
        client = make_client(config, store, completion)

        response = client.post("/api/analyze", json={"fileContent": "x", "fileName": "a.pdf"})

        assert response.status_code == 500
        assert response.json()["error"] == "quota exceeded"

    def test_malformed_answer_returns_500(self, config, store):
        client = make_client(config, store, FakeCompletionClient(response="no json here"))

        response = client.post("/api/analyze", json={"fileContent": "x", "fileName": "a.pdf"})

        assert response.status_code == 500
        assert response.json()["success"] is False

    def test_missing_fields_rejected(self, config, store):
        client = make_client(config, store)

        response = client.post("/api/analyze", json={"fileName": "a.pdf"})

        assert response.status_code == 422


class TestContractsEndpoints:
    """Tests for the contract collection routes."""

    def test_upload_sample_contract(self, config, store):
        client = make_client(config, store)

        response = upload_pdf(client, FIXTURE_FILENAME)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["filename"] == FIXTURE_FILENAME
        assert [e["id"] for e in data["analysis"]["timelineEvents"]] == ["1", "2", "3", "4", "5"]
        assert all("daysUntil" in e for e in data["analysis"]["timelineEvents"])
        assert store.active_contract.contract_id == data["contractId"]

    def test_upload_with_model(self, config, store):
        client = make_client(config, store, FakeCompletionClient(response=MODEL_ANSWER))

        response = upload_pdf(client)

        assert response.status_code == 201
        assert response.json()["data"]["analysis"]["metadata"]["value"] == "$9,000"

    def test_upload_timeout_returns_408(self, config, store):
        completion = FakeCompletionClient(error=CompletionTimeoutError(message="Request timed out"))
        client = make_client(config, store, completion)

        response = upload_pdf(client)

        assert response.status_code == 408
        body = response.json()
        assert body["error"] == "TIMEOUT"
        assert "took too long" in body["message"]
        assert store.contracts == []

    def test_upload_failure_returns_500(self, config, store):
        client = make_client(config, store, FakeCompletionClient(response="garbage"))

        response = upload_pdf(client)

        assert response.status_code == 500
        assert response.json()["error"] == "ANALYSIS_FAILED"
        assert store.contracts == []

    def test_unsupported_format_returns_415(self, config, store):
        client = make_client(config, store)

        response = client.post(
            "/api/contracts",
            files={"file": ("sheet.xlsx", b"data", "application/octet-stream")},
        )

        assert response.status_code == 415

    def test_list_get_and_delete(self, config, store):
        client = make_client(config, store)
        contract_id = upload_pdf(client, FIXTURE_FILENAME).json()["data"]["contractId"]

        listing = client.get("/api/contracts").json()
        assert [c["contractId"] for c in listing["contracts"]] == [contract_id]
        assert listing["activeContractId"] == contract_id

        assert client.get(f"/api/contracts/{contract_id}").json()["contractId"] == contract_id

        assert client.delete(f"/api/contracts/{contract_id}").status_code == 204
        assert client.get(f"/api/contracts/{contract_id}").status_code == 404
        assert client.get("/api/contracts").json() == {"contracts": [], "activeContractId": None}

    def test_delete_unknown_is_noop(self, config, store):
        client = make_client(config, store)

        assert client.delete("/api/contracts/CNT-404").status_code == 204

    def test_get_unknown_returns_404(self, config, store):
        client = make_client(config, store)

        assert client.get("/api/contracts/CNT-404").status_code == 404


class TestActiveContract:
    """Tests for active contract selection."""

    def test_select_and_clear(self, config, store):
        client = make_client(config, store)
        first = upload_pdf(client, FIXTURE_FILENAME).json()["data"]["contractId"]
        second = upload_pdf(client, FIXTURE_FILENAME).json()["data"]["contractId"]

        assert client.get("/api/contracts/active").json()["contract"]["contractId"] == second

        response = client.put("/api/contracts/active", json={"contractId": first})
        assert response.status_code == 200
        assert store.active_contract.contract_id == first

        response = client.put("/api/contracts/active", json={"contractId": None})
        assert response.json() == {"contract": None}
        assert client.get("/api/contracts/active").json() == {"contract": None}

    def test_select_unknown_returns_404(self, config, store):
        client = make_client(config, store)

        response = client.put("/api/contracts/active", json={"contractId": "CNT-404"})

        assert response.status_code == 404


class TestTimelineAndHealth:
    """Tests for derived views and health."""

    def test_timeline_view(self, config, store):
        client = make_client(config, store)
        contract_id = upload_pdf(client, FIXTURE_FILENAME).json()["data"]["contractId"]

        view = client.get(f"/api/contracts/{contract_id}/timeline").json()

        assert view["contractId"] == contract_id
        assert len(view["events"]) == 5
        assert view["span"]["totalDays"] == 335
        assert view["summary"]["highestRisk"] == "Critical"
        dates = [e["date"] for e in view["events"]]
        assert dates == sorted(dates)

    def test_timeline_unknown_returns_404(self, config, store):
        client = make_client(config, store)

        assert client.get("/api/contracts/CNT-404/timeline").status_code == 404

    def test_health(self, config, store):
        client = make_client(config, store)

        body = client.get("/health").json()

        assert body == {
            "status": "ok",
            "contracts": 0,
            "modelConfigured": False,
            "database": None,
        }

    def test_default_store_is_sql_backed(self, tmp_path):
        config = AppConfig(stage_delay=0, database_url=f"sqlite:///{tmp_path / 'api.db'}")
        client = TestClient(create_app(config=config))

        created = upload_pdf(client, FIXTURE_FILENAME).json()["data"]["contractId"]
        restarted = TestClient(create_app(config=config))

        body = restarted.get("/health").json()
        assert body["database"] is True
        assert body["contracts"] == 1
        assert restarted.get("/api/contracts/active").json()["contract"]["contractId"] == created
