"""Tests for API routes."""
import re
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from insight_hub.api.deps import get_orchestrator, get_pdf_exporter, get_record_store
from insight_hub.models.schemas import SECTION_KEYS

from conftest import build_offline_orchestrator

RESEARCH_ID_PATTERN = re.compile(r"^research_\d+_[0-9a-z]{9}$")


@pytest.fixture
def app():
    from insight_hub.main import app

    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app, store):
    orchestrator = build_offline_orchestrator(store)
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_record_store] = lambda: store
    with TestClient(app) as test_client:
        yield test_client


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "insight-hub"}


def test_post_research_then_fetch_record(client):
    response = client.post(
        "/research",
        json={"companyName": "Acme", "projectDomain": "Digital Transformation"},
    )
    assert response.status_code == 200
    research_id = response.json()["researchId"]
    assert RESEARCH_ID_PATTERN.match(research_id)

    record_response = client.get(f"/research/{research_id}")
    assert record_response.status_code == 200
    record = record_response.json()
    assert record["id"] == research_id
    assert record["companyName"] == "Acme"
    assert record["projectDomain"] == "Digital Transformation"
    assert record["generatedAt"]
    assert set(record["sections"]) == set(SECTION_KEYS)
    assert "Acme" in record["sections"]["overview"]["content"][0]["text"]
    for section in record["sections"].values():
        assert section["content"]
        assert all(block["text"] for block in section["content"])


def test_post_research_requires_both_fields(client):
    response = client.post("/research", json={"companyName": ""})
    assert response.status_code == 400
    assert response.json() == {"error": "Company name and project domain are required"}


@pytest.mark.parametrize(
    "body",
    [
        {"companyName": "   ", "projectDomain": "Cloud"},
        {"companyName": "Acme", "projectDomain": "\t"},
        {"companyName": 42, "projectDomain": "Cloud"},
        {},
        ["Acme", "Cloud"],
        {"company_name": "Acme", "project_domain": "Cloud"},
    ],
)
def test_post_research_rejects_blank_or_malformed_fields(client, body):
    response = client.post("/research", json=body)
    assert response.status_code == 400
    assert response.json()["error"] == "Company name and project domain are required"


def test_post_research_unreadable_body_is_server_error(client):
    response = client.post(
        "/research",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to process research request"}


def test_post_research_pipeline_failure_stores_nothing(app, client, store):
    failing = MagicMock()
    failing.run = AsyncMock(side_effect=RuntimeError("boom"))
    app.dependency_overrides[get_orchestrator] = lambda: failing

    response = client.post("/research", json={"companyName": "Acme", "projectDomain": "Cloud"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to process research request"}
    assert len(store) == 0


def test_get_unknown_research_returns_404(client):
    response = client.get("/research/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"error": "Research data not found"}


def test_get_research_store_failure_returns_500(app, client):
    broken = MagicMock()
    broken.get = AsyncMock(side_effect=OSError("disk gone"))
    app.dependency_overrides[get_record_store] = lambda: broken

    response = client.get("/research/anything")
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch research data"}


def test_pdf_export_unavailable_without_exporter(client):
    research_id = client.post(
        "/research", json={"companyName": "Acme", "projectDomain": "Cloud"}
    ).json()["researchId"]

    response = client.post(f"/research/{research_id}/pdf")
    assert response.status_code == 501
    assert response.json() == {"error": "PDF export is not available"}

    # The record stays readable regardless of the export outcome.
    assert client.get(f"/research/{research_id}").status_code == 200


def test_pdf_export_unknown_record(client):
    response = client.post("/research/missing/pdf")
    assert response.status_code == 404


def test_pdf_export_delegates_to_exporter(app, client):
    class FakeExporter:
        media_type = "application/pdf"

        def __init__(self):
            self.exported = []

        async def export(self, record):
            self.exported.append(record.id)
            return b"%PDF-1.4 fake"

    exporter = FakeExporter()
    app.dependency_overrides[get_pdf_exporter] = lambda: exporter
    research_id = client.post(
        "/research", json={"companyName": "Acme", "projectDomain": "Cloud"}
    ).json()["researchId"]

    response = client.post(f"/research/{research_id}/pdf")

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content == b"%PDF-1.4 fake"
    assert exporter.exported == [research_id]
