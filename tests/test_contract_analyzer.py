"""
Unit tests for ContractAnalysisService.

Covers the contract lifecycle: registration, claiming, extraction checks that
must fail before any analysis request, stored results and failure marking.
"""

from unittest.mock import Mock

import pytest

from config.settings import settings
from services.analysis_orchestrator import AnalysisOrchestrator
from services.contract_analyzer import ContractAnalysisService
from services.data_models import AnalysisResult, ContractStatus, ExtractionResult
from services.exceptions import (
    AnalysisInProgressError,
    AnalysisServiceError,
    ConfigurationError,
    ContractNotFoundError,
    ExtractionInsufficientError,
    InvalidUploadError,
    UnsupportedFileTypeError,
)
from tests.fakes import FakeAnalysisClient


DOCX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def register(service, file_name="msa.docx"):
    return service.register_contract(file_name, b"binary document content", DOCX_CONTENT_TYPE)


def test_register_contract_starts_pending(analysis_service):
    record = register(analysis_service)

    assert record.status == ContractStatus.PENDING
    assert record.file_type == "docx"
    assert record.file_size == len(b"binary document content")


def test_register_rejects_unsupported_extension(analysis_service):
    with pytest.raises(UnsupportedFileTypeError):
        analysis_service.register_contract("notes.txt", b"plain text", "text/plain")


def test_register_rejects_empty_file(analysis_service):
    with pytest.raises(InvalidUploadError):
        analysis_service.register_contract("empty.pdf", b"", "application/pdf")


def test_successful_analysis_is_stored(analysis_service, fake_client, contract_text):
    record = register(analysis_service)

    result = analysis_service.analyze_contract(record.contract_id)

    stored = analysis_service.get_contract(record.contract_id)
    assert stored.status == ContractStatus.COMPLETED
    assert stored.risk_score == result.overall_risk_score
    assert stored.extracted_text == contract_text
    assert stored.page_count == 2
    assert analysis_service.get_analysis(record.contract_id) is result
    assert fake_client.document_calls == [contract_text]


def test_short_extraction_fails_before_any_analysis_request(repository, fake_client):
    reader = Mock()
    reader.detect_file_type.return_value = "pdf"
    reader.extract_text.return_value = ExtractionResult(text="Page 1", page_count=1, is_scanned=False)
    service = ContractAnalysisService(repository, reader, AnalysisOrchestrator(fake_client))
    record = service.register_contract("scan.pdf", b"%PDF-1.4", "application/pdf")

    with pytest.raises(ExtractionInsufficientError) as exc_info:
        service.analyze_contract(record.contract_id)

    assert "empty or corrupted" in exc_info.value.message
    assert fake_client.total_calls == 0

    stored = service.get_contract(record.contract_id)
    assert stored.status == ContractStatus.FAILED
    assert stored.error_code == "INSUFFICIENT_TEXT"
    assert service.get_analysis(record.contract_id) is None


def test_scanned_document_message(repository, fake_client):
    reader = Mock()
    reader.detect_file_type.return_value = "pdf"
    reader.extract_text.return_value = ExtractionResult(text="", page_count=3, is_scanned=True, warning="scanned")
    service = ContractAnalysisService(repository, reader, AnalysisOrchestrator(fake_client))
    record = service.register_contract("scan.pdf", b"%PDF-1.4", "application/pdf")

    with pytest.raises(ExtractionInsufficientError) as exc_info:
        service.analyze_contract(record.contract_id)

    assert exc_info.value.is_scanned
    assert "scanned" in exc_info.value.message


def test_analysis_failure_marks_contract_failed(repository, document_reader):
    client = FakeAnalysisClient()
    client.analyze_document = Mock(side_effect=AnalysisServiceError("Service unavailable"))
    service = ContractAnalysisService(repository, document_reader, AnalysisOrchestrator(client))
    record = register(service)

    with pytest.raises(AnalysisServiceError):
        service.analyze_contract(record.contract_id)

    stored = service.get_contract(record.contract_id)
    assert stored.status == ContractStatus.FAILED
    assert stored.error_code == "ANALYSIS_FAILED"
    assert stored.error_message == "Service unavailable"
    assert service.get_analysis(record.contract_id) is None


def test_rerun_replaces_previous_analysis(analysis_service, fake_client):
    record = register(analysis_service)
    analysis_service.analyze_contract(record.contract_id)

    fake_client.document_result = AnalysisResult(summary="Second run", overall_risk_score=9.0, risk_summary="Worse.")
    analysis_service.analyze_contract(record.contract_id)

    analysis = analysis_service.get_analysis(record.contract_id)
    assert analysis.summary == "Second run"
    assert analysis_service.get_contract(record.contract_id).risk_score == 9.0


def test_reanalysis_reuses_stored_text(analysis_service, document_reader, fake_client):
    record = register(analysis_service)
    analysis_service.analyze_contract(record.contract_id)

    analysis_service.reanalyze_contract(record.contract_id)

    assert document_reader.extract_text.call_count == 1
    assert len(fake_client.document_calls) == 2


def test_reanalysis_extracts_when_no_text_is_stored(analysis_service, document_reader):
    record = register(analysis_service)

    analysis_service.reanalyze_contract(record.contract_id)

    assert document_reader.extract_text.call_count == 1


def test_second_claim_is_rejected(analysis_service, repository):
    record = register(analysis_service)
    repository.claim_for_processing(record.contract_id)

    with pytest.raises(AnalysisInProgressError):
        analysis_service.start_analysis(record.contract_id)


def test_unknown_contract(analysis_service):
    with pytest.raises(ContractNotFoundError):
        analysis_service.start_analysis("missing-id")


def test_unconfigured_service_rejects_analysis_before_claiming(repository, document_reader):
    service = ContractAnalysisService(repository, document_reader, orchestrator=None)
    record = register(service)

    with pytest.raises(ConfigurationError) as exc_info:
        service.start_analysis(record.contract_id)

    assert exc_info.value.code == "API_KEY_MISSING"
    assert service.get_contract(record.contract_id).status == ContractStatus.PENDING
    assert not service.is_configured


def test_from_settings_without_key_disables_analysis(monkeypatch):
    monkeypatch.setattr(settings, "ANTHROPIC_API_KEY", None)

    service = ContractAnalysisService.from_settings()

    assert not service.is_configured


def test_analyze_text(analysis_service, fake_client, contract_text):
    result = analysis_service.analyze_text("   " + contract_text + "   ")

    assert fake_client.document_calls == [contract_text]
    assert result.metadata["mode"] == "single_pass"


def test_analyze_short_text_makes_no_request(analysis_service, fake_client):
    with pytest.raises(ExtractionInsufficientError):
        analysis_service.analyze_text("Too short")

    assert fake_client.total_calls == 0
