# DEPENDENCIES
from .exceptions import ContractAnalysisError
from .data_models import Chunk
from .data_models import RiskLevel
from .data_models import ClauseResult
from .data_models import AnalysisResult
from .data_models import ClauseCategory
from .data_models import ContractRecord
from .data_models import ContractStatus
from .data_models import SynthesisResult
from .data_models import ExtractionResult
from .chunk_splitter import ChunkSplitter
from .clause_deduplicator import ClauseDeduplicator
from .contract_repository import ContractRepository
from .contract_repository import InMemoryContractRepository


__all__ = ['Chunk',
           'RiskLevel',
           'ClauseResult',
           'ChunkSplitter',
           'AnalysisResult',
           'ClauseCategory',
           'ContractRecord',
           'ContractStatus',
           'SynthesisResult',
           'ExtractionResult',
           'ClauseDeduplicator',
           'ContractRepository',
           'ContractAnalysisError',
           'InMemoryContractRepository',
          ]
