# DEPENDENCIES
from enum import Enum
from typing import Any
from typing import Dict
from typing import List
from typing import Optional
from dataclasses import field
from datetime import datetime
from dataclasses import dataclass


class ClauseCategory(Enum):
    """
    Fixed clause categories the analysis service classifies into
    """
    PAYMENT_TERMS         = "PAYMENT_TERMS"
    LIABILITY             = "LIABILITY"
    INDEMNIFICATION       = "INDEMNIFICATION"
    TERMINATION           = "TERMINATION"
    INTELLECTUAL_PROPERTY = "INTELLECTUAL_PROPERTY"
    CONFIDENTIALITY       = "CONFIDENTIALITY"
    NON_COMPETE           = "NON_COMPETE"
    AUTO_RENEWAL          = "AUTO_RENEWAL"
    DISPUTE_RESOLUTION    = "DISPUTE_RESOLUTION"
    DATA_PRIVACY          = "DATA_PRIVACY"
    FORCE_MAJEURE         = "FORCE_MAJEURE"
    OTHER                 = "OTHER"


class RiskLevel(Enum):
    """
    Ordinal clause severity: LOW < MEDIUM < HIGH < CRITICAL
    """
    LOW      = "LOW"
    MEDIUM   = "MEDIUM"
    HIGH     = "HIGH"
    CRITICAL = "CRITICAL"


    @classmethod
    def rank(cls, risk_level: Any) -> int:
        """
        Numeric rank of a risk level (1-4); anything unrecognized ranks 0
        """
        if isinstance(risk_level, RiskLevel):
            risk_level = risk_level.value

        return _RISK_RANKS.get(risk_level, 0)


_RISK_RANKS = {RiskLevel.LOW.value      : 1,
               RiskLevel.MEDIUM.value   : 2,
               RiskLevel.HIGH.value     : 3,
               RiskLevel.CRITICAL.value : 4,
              }


class ContractStatus(Enum):
    PENDING    = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED  = "COMPLETED"
    FAILED     = "FAILED"


@dataclass(frozen = True)
class ClauseResult:
    """
    One clause extracted and assessed by the analysis service
    """
    category       : str    # ClauseCategory value
    exact_text     : str    # Excerpt copied from the contract
    risk_level     : str    # RiskLevel value
    explanation    : str
    recommendation : str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"category"       : self.category,
                "exact_text"     : self.exact_text,
                "risk_level"     : self.risk_level,
                "explanation"    : self.explanation,
                "recommendation" : self.recommendation,
               }


@dataclass
class AnalysisResult:
    """
    Unified analysis of one contract (or of one chunk of it, before synthesis)
    """
    summary            : str
    overall_risk_score : float  # 1.0-10.0
    risk_summary       : str
    clauses            : List[ClauseResult] = field(default_factory = list)
    metadata           : Dict[str, Any]     = field(default_factory = dict)

    def risk_distribution(self) -> Dict[str, int]:
        """
        Number of clauses per risk level
        """
        return count_risk_levels(self.clauses)


    def to_dict(self) -> Dict[str, Any]:
        return {"summary"            : self.summary,
                "overall_risk_score" : round(self.overall_risk_score, 2),
                "risk_summary"       : self.risk_summary,
                "clauses"            : [clause.to_dict() for clause in self.clauses],
                "risk_distribution"  : self.risk_distribution(),
                "metadata"           : self.metadata,
               }


@dataclass(frozen = True)
class SynthesisResult:
    """
    Document-level verdict synthesized from chunk findings
    """
    summary            : str
    overall_risk_score : float
    risk_summary       : str

    def to_dict(self) -> Dict[str, Any]:
        return {"summary"            : self.summary,
                "overall_risk_score" : round(self.overall_risk_score, 2),
                "risk_summary"       : self.risk_summary,
               }


@dataclass(frozen = True)
class Chunk:
    """
    Contiguous slice of the source text sent to the analysis service on its own
    """
    text      : str
    index     : int  # 1-based position
    total     : int
    start_pos : int  # Window [start_pos, end_pos) in the source, before trimming
    end_pos   : int


@dataclass
class ExtractionResult:
    """
    Output of document text extraction
    """
    text           : str
    page_count     : Optional[int]
    is_scanned     : bool
    warning        : Optional[str] = None
    token_estimate : int           = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"page_count"     : self.page_count,
                "is_scanned"     : self.is_scanned,
                "warning"        : self.warning,
                "token_estimate" : self.token_estimate,
                "text_length"    : len(self.text),
               }


@dataclass
class ContractRecord:
    """
    Uploaded contract and the state of its analysis
    """
    contract_id    : str
    file_name      : str
    file_type      : str             # "pdf" or "docx"
    file_size      : int
    content        : bytes           = b""
    status         : ContractStatus  = ContractStatus.PENDING
    extracted_text : Optional[str]   = None
    page_count     : Optional[int]   = None
    risk_score     : Optional[float] = None
    error_code     : Optional[str]   = None
    error_message  : Optional[str]   = None
    created_at     : datetime        = field(default_factory = datetime.now)
    updated_at     : datetime        = field(default_factory = datetime.now)

    def touch(self):
        self.updated_at = datetime.now()


    def to_dict(self) -> Dict[str, Any]:
        return {"contract_id"   : self.contract_id,
                "file_name"     : self.file_name,
                "file_type"     : self.file_type,
                "file_size"     : self.file_size,
                "status"        : self.status.value,
                "page_count"    : self.page_count,
                "risk_score"    : self.risk_score,
                "error_code"    : self.error_code,
                "error_message" : self.error_message,
                "created_at"    : self.created_at.isoformat(),
                "updated_at"    : self.updated_at.isoformat(),
               }


def count_risk_levels(clauses: List[ClauseResult]) -> Dict[str, int]:
    """
    Count clauses per risk level, every level present even when zero
    """
    counts = {level.value: 0 for level in RiskLevel}

    for clause in clauses:
        if clause.risk_level in counts:
            counts[clause.risk_level] += 1

    return counts
