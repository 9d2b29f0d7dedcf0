# DEPENDENCIES
import uuid
import threading
from abc import ABC
from typing import Dict
from typing import List
from typing import Optional
from abc import abstractmethod
from utils.logger import log_info
from services.data_models import AnalysisResult
from services.data_models import ContractRecord
from services.data_models import ContractStatus
from services.exceptions import ContractNotFoundError
from services.exceptions import AnalysisInProgressError


class ContractRepository(ABC):
    """
    Persistence boundary for contracts, their status and their latest analysis
    """
    @abstractmethod
    def create(self, file_name: str, file_type: str, content: bytes) -> ContractRecord:
        ...

    @abstractmethod
    def get(self, contract_id: str) -> ContractRecord:
        ...

    @abstractmethod
    def list_contracts(self) -> List[ContractRecord]:
        ...

    @abstractmethod
    def claim_for_processing(self, contract_id: str) -> ContractRecord:
        """
        Atomically move a contract to PROCESSING; raises AnalysisInProgressError if it already is
        """

    @abstractmethod
    def save_extraction(self, contract_id: str, extracted_text: str, page_count: Optional[int]):
        ...

    @abstractmethod
    def save_analysis(self, contract_id: str, result: AnalysisResult):
        """
        Store the analysis of a contract, replacing any previous one
        """

    @abstractmethod
    def get_analysis(self, contract_id: str) -> Optional[AnalysisResult]:
        ...

    @abstractmethod
    def mark_completed(self, contract_id: str, risk_score: float):
        ...

    @abstractmethod
    def mark_failed(self, contract_id: str, error_code: str, error_message: str):
        ...


class InMemoryContractRepository(ContractRepository):
    """
    Thread-safe in-process repository
    """
    def __init__(self):
        self._contracts : Dict[str, ContractRecord] = dict()
        self._analyses  : Dict[str, AnalysisResult] = dict()
        self._lock                                  = threading.Lock()


    def create(self, file_name: str, file_type: str, content: bytes) -> ContractRecord:
        record = ContractRecord(contract_id = str(uuid.uuid4()),
                                file_name   = file_name,
                                file_type   = file_type,
                                file_size   = len(content),
                                content     = content,
                               )

        with self._lock:
            self._contracts[record.contract_id] = record

        log_info("Contract registered", contract_id = record.contract_id, file_name = file_name, file_size = record.file_size)

        return record


    def get(self, contract_id: str) -> ContractRecord:
        with self._lock:
            return self._get_locked(contract_id)


    def list_contracts(self) -> List[ContractRecord]:
        with self._lock:
            return sorted(self._contracts.values(), key = lambda record: record.created_at, reverse = True)


    def claim_for_processing(self, contract_id: str) -> ContractRecord:
        with self._lock:
            record = self._get_locked(contract_id)

            if (record.status == ContractStatus.PROCESSING):
                raise AnalysisInProgressError(f"Contract {contract_id} is already being analyzed")

            record.status        = ContractStatus.PROCESSING
            record.error_code    = None
            record.error_message = None
            record.touch()

            return record


    def save_extraction(self, contract_id: str, extracted_text: str, page_count: Optional[int]):
        with self._lock:
            record                = self._get_locked(contract_id)
            record.extracted_text = extracted_text
            record.page_count     = page_count
            record.touch()


    def save_analysis(self, contract_id: str, result: AnalysisResult):
        with self._lock:
            self._get_locked(contract_id)
            self._analyses[contract_id] = result


    def get_analysis(self, contract_id: str) -> Optional[AnalysisResult]:
        with self._lock:
            self._get_locked(contract_id)
            return self._analyses.get(contract_id)


    def mark_completed(self, contract_id: str, risk_score: float):
        with self._lock:
            record            = self._get_locked(contract_id)
            record.status     = ContractStatus.COMPLETED
            record.risk_score = risk_score
            record.touch()


    def mark_failed(self, contract_id: str, error_code: str, error_message: str):
        with self._lock:
            record               = self._get_locked(contract_id)
            record.status        = ContractStatus.FAILED
            record.error_code    = error_code
            record.error_message = error_message
            record.touch()


    def _get_locked(self, contract_id: str) -> ContractRecord:
        record = self._contracts.get(contract_id)

        if record is None:
            raise ContractNotFoundError(f"Contract not found: {contract_id}")

        return record
