"""
Unit tests for ClauseDeduplicator.

Clauses are keyed by the lowercased, trimmed first 100 characters of their
excerpt; the riskiest reading of each clause is kept.
"""

from services.clause_deduplicator import ClauseDeduplicator
from tests.fakes import make_clause


LIABILITY = "Limitation of liability. In no event shall either party be liable for indirect damages."
INDEMNITY = "The Customer shall indemnify the Supplier against all third-party claims."


def test_higher_risk_duplicate_replaces_earlier_clause():
    clauses = [make_clause(LIABILITY, "MEDIUM"), make_clause(LIABILITY, "HIGH")]

    result = ClauseDeduplicator().deduplicate_clauses(clauses)

    assert len(result) == 1
    assert result[0].risk_level == "HIGH"


def test_lower_risk_duplicate_is_dropped():
    clauses = [make_clause(LIABILITY, "HIGH"), make_clause(LIABILITY, "MEDIUM")]

    result = ClauseDeduplicator().deduplicate_clauses(clauses)

    assert result == [clauses[0]]


def test_equal_risk_keeps_first_seen():
    first = make_clause(LIABILITY, "HIGH", explanation="first reading")
    second = make_clause(LIABILITY, "HIGH", explanation="second reading")

    result = ClauseDeduplicator().deduplicate_clauses([first, second])

    assert result == [first]


def test_order_follows_first_appearance():
    a_medium = make_clause(LIABILITY, "MEDIUM")
    a_high = make_clause(LIABILITY, "HIGH")
    b_low = make_clause(INDEMNITY, "LOW", category="INDEMNIFICATION")

    result = ClauseDeduplicator().deduplicate_clauses([a_medium, a_high, b_low])

    assert result == [a_high, b_low]


def test_fingerprint_ignores_case_and_surrounding_whitespace():
    clauses = [make_clause("  " + LIABILITY.upper(), "LOW"), make_clause(LIABILITY, "CRITICAL")]

    result = ClauseDeduplicator().deduplicate_clauses(clauses)

    assert len(result) == 1
    assert result[0].risk_level == "CRITICAL"


def test_clauses_sharing_first_100_characters_are_merged():
    prefix = "x" * 100
    clauses = [make_clause(prefix + " first ending", "LOW"), make_clause(prefix + " different ending", "LOW")]

    result = ClauseDeduplicator().deduplicate_clauses(clauses)

    assert len(result) == 1


def test_unrecognized_risk_level_never_displaces_known_level():
    known = make_clause(LIABILITY, "LOW")
    unknown = make_clause(LIABILITY, "SEVERE")

    deduplicator = ClauseDeduplicator()

    assert deduplicator.deduplicate_clauses([known, unknown]) == [known]
    assert deduplicator.deduplicate_clauses([unknown, known]) == [known]


def test_deduplication_is_idempotent():
    clauses = [
        make_clause(LIABILITY, "MEDIUM"),
        make_clause(INDEMNITY, "HIGH"),
        make_clause(LIABILITY, "CRITICAL"),
        make_clause(INDEMNITY, "LOW"),
    ]
    deduplicator = ClauseDeduplicator()

    once = deduplicator.deduplicate_clauses(clauses)

    assert deduplicator.deduplicate_clauses(once) == once


def test_empty_input():
    assert ClauseDeduplicator().deduplicate_clauses([]) == []
