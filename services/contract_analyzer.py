# DEPENDENCIES
from typing import List
from typing import Optional
from utils.logger import log_info
from utils.logger import log_error
from utils.logger import log_warning
from config.settings import settings
from utils.validators import ContractValidator
from utils.document_reader import DocumentReader
from services.data_models import AnalysisResult
from services.data_models import ContractRecord
from services.exceptions import ConfigurationError
from services.analysis_client import AnalysisClient
from services.exceptions import ContractAnalysisError
from services.analysis_orchestrator import ProgressCallback
from services.analysis_orchestrator import AnalysisOrchestrator
from services.contract_repository import ContractRepository
from services.contract_repository import InMemoryContractRepository


class ContractAnalysisService:
    """
    Contract lifecycle around the analysis pipeline: register → claim → extract → analyze → store

    A contract is claimed (PROCESSING) before its analysis runs. Any failure marks it FAILED with the
    error code and message and re-raises; only a complete analysis is ever stored, replacing the previous one.
    """
    def __init__(self, repository: Optional[ContractRepository] = None, document_reader: Optional[DocumentReader] = None,
                 orchestrator: Optional[AnalysisOrchestrator] = None):
        """
        Initialize contract analysis service

        Arguments:
        ----------
            repository      { ContractRepository }   : Contract storage (default: in-memory)

            document_reader { DocumentReader }       : Text extractor

            orchestrator    { AnalysisOrchestrator } : Analysis pipeline; None when analysis is not configured
        """
        self.repository      = repository or InMemoryContractRepository()
        self.document_reader = document_reader or DocumentReader()
        self.orchestrator    = orchestrator


    @classmethod
    def from_settings(cls, repository: Optional[ContractRepository] = None) -> "ContractAnalysisService":
        """
        Build the service from application settings

        A missing API key does not prevent startup: contracts can still be uploaded and read, and every
        analysis request is answered with API_KEY_MISSING
        """
        try:
            orchestrator = AnalysisOrchestrator(AnalysisClient.from_settings())

        except ConfigurationError as e:
            log_warning("Analysis disabled", reason = e.message, code = e.code)
            orchestrator = None

        return cls(repository = repository, orchestrator = orchestrator)


    @property
    def is_configured(self) -> bool:
        return self.orchestrator is not None


    def register_contract(self, file_name: str, content: bytes, content_type: Optional[str] = None) -> ContractRecord:
        """
        Validate and store an uploaded contract in PENDING state
        """
        extension = ContractValidator.validate_upload(file_name, len(content))
        file_type = self.document_reader.detect_file_type(content_type, file_name) or extension.lstrip(".")

        return self.repository.create(file_name = file_name, file_type = file_type, content = content)


    def get_contract(self, contract_id: str) -> ContractRecord:
        return self.repository.get(contract_id)


    def list_contracts(self) -> List[ContractRecord]:
        return self.repository.list_contracts()


    def get_analysis(self, contract_id: str) -> Optional[AnalysisResult]:
        return self.repository.get_analysis(contract_id)


    def start_analysis(self, contract_id: str) -> ContractRecord:
        """
        Claim a contract for analysis

        Raises:
        -------
            ConfigurationError      : analysis is not configured (checked before the claim)

            ContractNotFoundError   : unknown contract

            AnalysisInProgressError : the contract is already being analyzed
        """
        self._require_orchestrator()

        record = self.repository.claim_for_processing(contract_id)

        log_info("Contract claimed for analysis", contract_id = contract_id)

        return record


    def run_analysis(self, contract_id: str, reuse_extracted_text: bool = False, progress_callback: Optional[ProgressCallback] = None) -> AnalysisResult:
        """
        Run the analysis of a claimed contract

        Arguments:
        ----------
            contract_id          { str }      : Contract previously claimed with start_analysis

            reuse_extracted_text { bool }     : Analyze the stored text instead of re-extracting, when long enough

            progress_callback    { callable } : Optional callback(stage, message)

        Returns:
        --------
            { AnalysisResult }                : Stored analysis
        """
        try:
            orchestrator  = self._require_orchestrator()
            record        = self.repository.get(contract_id)
            contract_text = self._contract_text(record, reuse_extracted_text)

            result        = orchestrator.analyze(contract_text, progress_callback = progress_callback)

            self.repository.save_analysis(contract_id, result)
            self.repository.mark_completed(contract_id, result.overall_risk_score)

            log_info("Contract analysis stored",
                     contract_id        = contract_id,
                     overall_risk_score = result.overall_risk_score,
                     num_clauses        = len(result.clauses),
                    )

            return result

        except ContractAnalysisError as e:
            self.repository.mark_failed(contract_id, e.code, e.message)
            log_error(e, context = {"component" : "ContractAnalysisService", "operation" : "run_analysis", "contract_id" : contract_id})
            raise

        except Exception as e:
            self.repository.mark_failed(contract_id, ContractAnalysisError.code, str(e))
            log_error(e, context = {"component" : "ContractAnalysisService", "operation" : "run_analysis", "contract_id" : contract_id})
            raise


    def analyze_contract(self, contract_id: str, progress_callback: Optional[ProgressCallback] = None) -> AnalysisResult:
        """
        Claim and analyze a contract, extracting its text from the stored document
        """
        self.start_analysis(contract_id)

        return self.run_analysis(contract_id, progress_callback = progress_callback)


    def reanalyze_contract(self, contract_id: str, progress_callback: Optional[ProgressCallback] = None) -> AnalysisResult:
        """
        Analyze a contract again, reusing its stored text when there is enough of it
        """
        self.start_analysis(contract_id)

        return self.run_analysis(contract_id, reuse_extracted_text = True, progress_callback = progress_callback)


    def analyze_text(self, contract_text: str, progress_callback: Optional[ProgressCallback] = None) -> AnalysisResult:
        """
        Analyze pasted contract text without storing it
        """
        orchestrator = self._require_orchestrator()
        text         = ContractValidator.validate_contract_text(contract_text)

        return orchestrator.analyze(text, progress_callback = progress_callback)


    def _contract_text(self, record: ContractRecord, reuse_extracted_text: bool) -> str:
        if reuse_extracted_text and record.extracted_text and (len(record.extracted_text) > settings.MIN_EXTRACTED_TEXT_LENGTH):
            log_info("Reusing stored contract text", contract_id = record.contract_id, text_length = len(record.extracted_text))
            return record.extracted_text

        extraction = self.document_reader.extract_text(record.content, record.file_type)

        # Nothing is sent for analysis unless extraction produced enough text
        ContractValidator.validate_extracted_text(extraction)

        self.repository.save_extraction(record.contract_id, extraction.text, extraction.page_count)

        return extraction.text


    def _require_orchestrator(self) -> AnalysisOrchestrator:
        if self.orchestrator is None:
            raise ConfigurationError("AI service not configured. Please add your Anthropic API key.")

        return self.orchestrator
