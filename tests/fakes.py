"""
Test doubles shared across the test suite.

FakeAnalysisClient stands in for AnalysisClient: it answers from a script and
records every request so tests can assert on the calls the pipeline makes.
"""

from typing import Dict, List, Optional

from services.data_models import AnalysisResult, ClauseResult, SynthesisResult
from services.exceptions import AnalysisServiceError


def make_clause(exact_text, risk_level="MEDIUM", category="LIABILITY", explanation="Limits the supplier's exposure.", recommendation=""):
    """Build a ClauseResult with sensible defaults."""
    return ClauseResult(
        category=category,
        exact_text=exact_text,
        risk_level=risk_level,
        explanation=explanation,
        recommendation=recommendation,
    )


def make_contract_text(total_chars, paragraph_chars=500):
    """Build contract-like text of roughly total_chars characters, in paragraphs of full sentences."""
    sentence = "The Supplier shall perform the Services in accordance with this Agreement. "
    paragraphs = []
    length = 0
    number = 1

    while length < total_chars:
        body = (sentence * (paragraph_chars // len(sentence) + 1))[:paragraph_chars].strip()
        paragraph = f"Section {number}. {body}"
        paragraphs.append(paragraph)
        length += len(paragraph) + 2
        number += 1

    return "\n\n".join(paragraphs)[:total_chars].strip()


class FakeAnalysisClient:
    """Scripted analysis client recording document, chunk and synthesis requests."""

    def __init__(
        self,
        document_result: Optional[AnalysisResult] = None,
        chunk_clauses: Optional[Dict[int, List[ClauseResult]]] = None,
        synthesis_result: Optional[SynthesisResult] = None,
        fail_on_chunk: Optional[int] = None,
        synthesis_error: Optional[Exception] = None,
    ):
        self.document_result = document_result
        self.chunk_clauses = chunk_clauses or {}
        self.synthesis_result = synthesis_result
        self.fail_on_chunk = fail_on_chunk
        self.synthesis_error = synthesis_error

        self.document_calls = []
        self.chunk_calls = []
        self.synthesis_calls = []

    @property
    def total_calls(self):
        return len(self.document_calls) + len(self.chunk_calls) + len(self.synthesis_calls)

    def analyze_document(self, full_text):
        self.document_calls.append(full_text)

        if self.document_result is not None:
            return self.document_result

        return AnalysisResult(
            summary="Master services agreement between two companies.",
            overall_risk_score=4.0,
            risk_summary="Liability cap is below market.",
            clauses=[make_clause("Liability is capped at fees paid in the prior month.")],
        )

    def analyze_chunk(self, chunk_text, chunk_index, total_chunks):
        self.chunk_calls.append((chunk_index, total_chunks, chunk_text))

        if self.fail_on_chunk == chunk_index:
            raise AnalysisServiceError(f"Upstream failure on chunk {chunk_index}")

        return AnalysisResult(
            summary=f"Summary of part {chunk_index}",
            overall_risk_score=5.0,
            risk_summary=f"Risks of part {chunk_index}",
            clauses=list(self.chunk_clauses.get(chunk_index, [])),
        )

    def synthesize(self, all_clauses, chunk_summaries):
        self.synthesis_calls.append((list(all_clauses), list(chunk_summaries)))

        if self.synthesis_error is not None:
            raise self.synthesis_error

        if self.synthesis_result is not None:
            return self.synthesis_result

        return SynthesisResult(
            summary="Long supply agreement with broad indemnities.",
            overall_risk_score=7.5,
            risk_summary="Uncapped indemnity and one-sided termination.",
        )
