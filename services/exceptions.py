# DEPENDENCIES
from typing import Any
from typing import Dict
from typing import Optional


class ContractAnalysisError(Exception):
    """
    Base class for every failure of the contract analysis pipeline

    Each error carries a stable machine-readable code and the HTTP status the API layer answers with
    """
    code        : str = "ANALYSIS_FAILED"
    status_code : int = 500

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)

        self.message = message

        if code:
            self.code = code


    def to_dict(self) -> Dict[str, Any]:
        return {"error" : self.message,
                "code"  : self.code,
               }


class ConfigurationError(ContractAnalysisError):
    """
    The analysis capability is not configured (missing or rejected credential); never retried automatically
    """
    code        = "API_KEY_MISSING"
    status_code = 503


class UsageLimitError(ContractAnalysisError):
    """
    Upstream quota or rate limit exceeded
    """
    code        = "LIMIT_REACHED"
    status_code = 429


class AnalysisServiceError(ContractAnalysisError):
    """
    The analysis service is unreachable or failed while answering
    """
    code        = "ANALYSIS_FAILED"
    status_code = 502


class MalformedResponseError(ContractAnalysisError):
    """
    The analysis service answered without the required structured payload
    """
    code        = "MALFORMED_RESPONSE"
    status_code = 502


class ExtractionInsufficientError(ContractAnalysisError):
    """
    Extraction produced too little text to analyze
    """
    code        = "INSUFFICIENT_TEXT"
    status_code = 422

    def __init__(self, message: str, is_scanned: bool = False, text_length: int = 0):
        super().__init__(message)

        self.is_scanned  = is_scanned
        self.text_length = text_length


class ExtractionError(ContractAnalysisError):
    """
    The document could not be parsed
    """
    code        = "EXTRACTION_FAILED"
    status_code = 422


class UnsupportedFileTypeError(ContractAnalysisError):
    code        = "UNSUPPORTED_FILE_TYPE"
    status_code = 415


class InvalidUploadError(ContractAnalysisError):
    code        = "INVALID_UPLOAD"
    status_code = 400


class ContractNotFoundError(ContractAnalysisError):
    code        = "NOT_FOUND"
    status_code = 404


class AnalysisInProgressError(ContractAnalysisError):
    code        = "ALREADY_PROCESSING"
    status_code = 409
