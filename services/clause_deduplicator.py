# DEPENDENCIES
from typing import Dict
from typing import List
from utils.logger import log_info
from services.data_models import RiskLevel
from services.data_models import ClauseResult


class ClauseDeduplicator:
    """
    Merges clauses extracted from overlapping chunks into one set, keeping the riskiest reading of each clause

    Two clauses are the same when their fingerprints match: the first 100 characters of the excerpt,
    lowercased and trimmed. Excerpts sharing a long opening phrase are merged even if they differ later on.
    """
    FINGERPRINT_LENGTH = 100

    @classmethod
    def fingerprint(cls, clause: ClauseResult) -> str:
        return clause.exact_text[:cls.FINGERPRINT_LENGTH].lower().strip()


    def deduplicate_clauses(self, clauses: List[ClauseResult]) -> List[ClauseResult]:
        """
        Deduplicate clauses by fingerprint

        A later clause replaces the retained one only when its risk level ranks strictly higher, so ties
        keep the first seen and unrecognized risk levels never displace a recognized one

        Arguments:
        ----------
            clauses { list } : Clauses from every chunk, in chunk order

        Returns:
        --------
            { list }         : One clause per fingerprint, in order of first appearance
        """
        retained : Dict[str, ClauseResult] = dict()

        for clause in clauses:
            key      = self.fingerprint(clause)
            existing = retained.get(key)

            if existing is None:
                retained[key] = clause

            elif (RiskLevel.rank(clause.risk_level) > RiskLevel.rank(existing.risk_level)):
                retained[key] = clause

        unique = list(retained.values())

        log_info("Clauses deduplicated",
                 total_clauses   = len(clauses),
                 unique_clauses  = len(unique),
                 removed_clauses = len(clauses) - len(unique),
                )

        return unique
