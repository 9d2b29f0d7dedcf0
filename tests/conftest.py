"""
Pytest configuration and shared fixtures.

Every pipeline test runs against a scripted analysis client; nothing here
reaches the Anthropic API.
"""

from unittest.mock import Mock

import pytest

from services.analysis_orchestrator import AnalysisOrchestrator
from services.chunk_splitter import ChunkSplitter
from services.contract_analyzer import ContractAnalysisService
from services.contract_repository import InMemoryContractRepository
from services.data_models import ExtractionResult
from tests.fakes import FakeAnalysisClient, make_contract_text
from utils.document_reader import DocumentReader


@pytest.fixture
def fake_client():
    """Scripted analysis client with default answers."""
    return FakeAnalysisClient()


@pytest.fixture
def small_splitter():
    """Splitter with a 1,000 character budget and no overlap, for short multi-chunk texts."""
    return ChunkSplitter(max_tokens_per_chunk=250, overlap_chars=0)


@pytest.fixture
def repository():
    return InMemoryContractRepository()


@pytest.fixture
def contract_text():
    """Extracted text long enough to pass validation, short enough for one pass."""
    return make_contract_text(3000)


@pytest.fixture
def document_reader(contract_text):
    """Real reader whose extraction is replaced by a fixed, sufficient result."""
    reader = DocumentReader()
    reader.extract_text = Mock(
        return_value=ExtractionResult(text=contract_text, page_count=2, is_scanned=False, token_estimate=750)
    )
    return reader


@pytest.fixture
def analysis_service(repository, document_reader, fake_client):
    """Service wired to the in-memory repository and the scripted client."""
    return ContractAnalysisService(
        repository=repository,
        document_reader=document_reader,
        orchestrator=AnalysisOrchestrator(fake_client),
    )
