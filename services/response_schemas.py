# DEPENDENCIES
from typing import Any
from typing import Dict
from typing import List
from pydantic import Field
from pydantic import BaseModel
from pydantic import ValidationError
from services.data_models import RiskLevel
from services.data_models import ClauseResult
from services.data_models import AnalysisResult
from services.data_models import ClauseCategory
from services.data_models import SynthesisResult
from services.exceptions import MalformedResponseError


class ClausePayload(BaseModel):
    category       : ClauseCategory
    exact_text     : str
    risk_level     : RiskLevel
    explanation    : str
    recommendation : str

    def to_clause(self) -> ClauseResult:
        return ClauseResult(category       = self.category.value,
                            exact_text     = self.exact_text,
                            risk_level     = self.risk_level.value,
                            explanation    = self.explanation,
                            recommendation = self.recommendation,
                           )


class SynthesisPayload(BaseModel):
    summary            : str   = Field(min_length = 1)
    overall_risk_score : float = Field(ge = 1.0, le = 10.0)
    risk_summary       : str

    def to_synthesis(self) -> SynthesisResult:
        return SynthesisResult(summary            = self.summary,
                               overall_risk_score = self.overall_risk_score,
                               risk_summary       = self.risk_summary,
                              )


class AnalysisPayload(SynthesisPayload):
    clauses : List[ClausePayload]

    def to_analysis(self) -> AnalysisResult:
        return AnalysisResult(summary            = self.summary,
                              overall_risk_score = self.overall_risk_score,
                              risk_summary       = self.risk_summary,
                              clauses            = [clause.to_clause() for clause in self.clauses],
                             )


def parse_analysis_payload(payload: Any) -> AnalysisResult:
    """
    Validate a tool payload against the clause-analysis schema

    Raises:
    -------
        MalformedResponseError : missing fields, wrong types, unknown enum values or out-of-range score
    """
    return _validate(AnalysisPayload, payload).to_analysis()


def parse_synthesis_payload(payload: Any) -> SynthesisResult:
    return _validate(SynthesisPayload, payload).to_synthesis()


def _validate(model: type, payload: Any):
    if not isinstance(payload, dict):
        raise MalformedResponseError(f"Expected a JSON object from the analysis service, got {type(payload).__name__}")

    try:
        return model.model_validate(payload)

    except ValidationError as e:
        raise MalformedResponseError(f"Analysis response does not match the expected schema: {_describe_errors(e)}") from e


def _describe_errors(error: ValidationError) -> str:
    problems : List[Dict[str, Any]] = error.errors()

    return "; ".join(f"{'.'.join(str(part) for part in problem['loc'])}: {problem['msg']}" for problem in problems[:5])
