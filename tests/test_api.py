"""
Unit tests for the HTTP API.

The application is built around a service wired to the in-memory repository
and the scripted analysis client.
"""

import io

import pytest
from fastapi.testclient import TestClient

from app import create_app
from services.contract_analyzer import ContractAnalysisService
from services.data_models import ExtractionResult


DOCX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


@pytest.fixture
def client(analysis_service):
    return TestClient(create_app(analysis_service))


def upload(client, file_name="msa.docx", content=b"docx bytes", content_type=DOCX_CONTENT_TYPE):
    files = {"file": (file_name, io.BytesIO(content), content_type)}
    return client.post("/api/v1/contracts", files=files)


def test_health_endpoint(client):
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["analysis_configured"] is True


def test_upload_contract(client):
    response = upload(client)

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "PENDING"
    assert data["file_type"] == "docx"
    assert "content" not in data


def test_upload_unsupported_file(client):
    response = upload(client, file_name="notes.txt", content_type="text/plain")

    assert response.status_code == 415
    data = response.json()
    assert data["code"] == "UNSUPPORTED_FILE_TYPE"
    assert data["timestamp"]


def test_analyze_runs_in_background_and_result_is_readable(client):
    contract_id = upload(client).json()["contract_id"]

    response = client.post(f"/api/v1/contracts/{contract_id}/analyze")

    assert response.status_code == 200
    assert response.json()["status"] == "processing"

    analysis = client.get(f"/api/v1/analysis/{contract_id}").json()
    assert analysis["status"] == "COMPLETED"
    assert analysis["risk_score"] == 4.0
    assert analysis["analysis"]["clauses"][0]["category"] == "LIABILITY"
    assert analysis["analysis"]["risk_distribution"]["MEDIUM"] == 1


def test_background_failure_is_recorded_on_contract(client, document_reader):
    document_reader.extract_text.return_value = ExtractionResult(text="", page_count=1, is_scanned=True)
    contract_id = upload(client).json()["contract_id"]

    response = client.post(f"/api/v1/contracts/{contract_id}/analyze")

    assert response.status_code == 200

    contract = client.get(f"/api/v1/contracts/{contract_id}").json()
    assert contract["status"] == "FAILED"
    assert contract["error_code"] == "INSUFFICIENT_TEXT"


def test_analyze_unknown_contract(client):
    response = client.post("/api/v1/contracts/unknown/analyze")

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_analyze_contract_already_processing(client, repository):
    contract_id = upload(client).json()["contract_id"]
    repository.claim_for_processing(contract_id)

    response = client.post(f"/api/v1/contracts/{contract_id}/analyze")

    assert response.status_code == 409
    assert response.json()["code"] == "ALREADY_PROCESSING"


def test_analyze_without_api_key(repository, document_reader):
    service = ContractAnalysisService(repository, document_reader, orchestrator=None)
    client = TestClient(create_app(service))
    contract_id = upload(client).json()["contract_id"]

    response = client.post(f"/api/v1/contracts/{contract_id}/analyze")

    assert response.status_code == 503
    assert response.json()["code"] == "API_KEY_MISSING"
    assert client.get(f"/api/v1/contracts/{contract_id}").json()["status"] == "PENDING"


def test_analysis_before_any_run(client):
    contract_id = upload(client).json()["contract_id"]

    data = client.get(f"/api/v1/analysis/{contract_id}").json()

    assert data["status"] == "PENDING"
    assert data["analysis"] is None


def test_reanalyze_reuses_extracted_text(client, document_reader):
    contract_id = upload(client).json()["contract_id"]
    client.post(f"/api/v1/contracts/{contract_id}/analyze")

    response = client.post(f"/api/v1/contracts/{contract_id}/reanalyze")

    assert response.status_code == 200
    assert document_reader.extract_text.call_count == 1
    assert client.get(f"/api/v1/contracts/{contract_id}").json()["status"] == "COMPLETED"


def test_list_contracts(client):
    upload(client)
    upload(client, file_name="nda.pdf", content_type="application/pdf")

    data = client.get("/api/v1/contracts").json()

    assert len(data["contracts"]) == 2


def test_analyze_text(client, contract_text):
    response = client.post("/api/v1/analyze/text", data={"contract_text": contract_text})

    assert response.status_code == 200
    data = response.json()
    assert data["overall_risk_score"] == 4.0
    assert data["metadata"]["mode"] == "single_pass"


def test_analyze_short_text(client):
    response = client.post("/api/v1/analyze/text", data={"contract_text": "Too short"})

    assert response.status_code == 422
    assert response.json()["code"] == "INSUFFICIENT_TEXT"
