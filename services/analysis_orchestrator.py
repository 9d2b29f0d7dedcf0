# DEPENDENCIES
from enum import Enum
from typing import List
from typing import Callable
from typing import Optional
from utils.logger import log_info
from utils.logger import log_error
from services.data_models import Chunk
from utils.logger import ContractAnalyzerLogger
from services.data_models import ClauseResult
from services.data_models import AnalysisResult
from utils.text_processor import TextProcessor
from services.chunk_splitter import ChunkSplitter
from services.analysis_client import AnalysisClient
from services.clause_deduplicator import ClauseDeduplicator


class AnalysisStage(Enum):
    """
    Stages of one analysis run
    """
    START       = "start"
    SINGLE_PASS = "single_pass"
    CHUNKING    = "chunking"
    PER_CHUNK   = "per_chunk"
    DEDUP       = "dedup"
    SYNTHESIZE  = "synthesize"
    DONE        = "done"
    FAILED      = "failed"


ProgressCallback = Callable[[AnalysisStage, str], None]


class AnalysisOrchestrator:
    """
    Pipeline controller : single-pass analysis for short contracts, chunk → dedup → synthesize for long ones

    One instance can serve many contracts; a run keeps its state in local variables only.
    """
    def __init__(self, analysis_client: AnalysisClient, chunk_splitter: Optional[ChunkSplitter] = None, deduplicator: Optional[ClauseDeduplicator] = None):
        """
        Initialize orchestrator

        Arguments:
        ----------
            analysis_client { AnalysisClient }     : Structured-extraction client (a scripted fake in tests)

            chunk_splitter  { ChunkSplitter }      : Chunk splitter (default: settings-driven)

            deduplicator    { ClauseDeduplicator } : Clause deduplicator
        """
        self.analysis_client = analysis_client
        self.chunk_splitter  = chunk_splitter or ChunkSplitter()
        self.deduplicator    = deduplicator or ClauseDeduplicator()


    @ContractAnalyzerLogger.log_execution_time("analyze_contract_text")
    def analyze(self, contract_text: str, progress_callback: Optional[ProgressCallback] = None) -> AnalysisResult:
        """
        Analyze a contract end to end

        Arguments:
        ----------
            contract_text     { str }      : Extracted contract text

            progress_callback { callable } : Optional callback(stage, message)

        Returns:
        --------
            { AnalysisResult } : Unified analysis; any failure raises and no partial result is returned
        """
        stage = AnalysisStage.START

        def advance(next_stage: AnalysisStage, message: str):
            nonlocal stage
            stage = next_stage

            log_info(message, stage = stage.value)

            if progress_callback:
                progress_callback(stage, message)

        try:
            advance(AnalysisStage.START, "Starting contract analysis")
            log_info("Contract text statistics", **TextProcessor.get_text_statistics(contract_text))

            chunks = self.chunk_splitter.build_chunks(contract_text)

            if (len(chunks) == 1):
                advance(AnalysisStage.SINGLE_PASS, "Contract fits in one request, analyzing directly")

                result          = self.analysis_client.analyze_document(chunks[0].text)
                result.metadata = {"mode"             : AnalysisStage.SINGLE_PASS.value,
                                   "chunk_count"      : 1,
                                   "raw_clause_count" : len(result.clauses),
                                  }

            else:
                advance(AnalysisStage.CHUNKING, f"Contract split into {len(chunks)} chunks for analysis")

                result = self._analyze_in_chunks(chunks, advance)

            advance(AnalysisStage.DONE, "Contract analysis complete")

            return result

        except Exception as e:
            failed_stage = stage
            advance(AnalysisStage.FAILED, "Contract analysis failed")
            log_error(e, context = {"component" : "AnalysisOrchestrator", "operation" : "analyze", "stage" : failed_stage.value})
            raise


    def _analyze_in_chunks(self, chunks: List[Chunk], advance: Callable[[AnalysisStage, str], None]) -> AnalysisResult:
        """
        Analyze chunks in order, then deduplicate every collected clause and synthesize the verdict
        """
        total           = len(chunks)
        all_clauses     = list()
        chunk_summaries = list()

        for chunk in chunks:
            advance(AnalysisStage.PER_CHUNK, f"Analyzing chunk {chunk.index}/{total}...")

            chunk_result = self.analysis_client.analyze_chunk(chunk.text, chunk.index, total)

            all_clauses.extend(chunk_result.clauses)
            chunk_summaries.append(f"Section {chunk.index}: {chunk_result.summary}")

        # Dedup runs once, on the clauses of every chunk
        advance(AnalysisStage.DEDUP, f"Deduplicating {len(all_clauses)} clauses")

        deduplicated : List[ClauseResult] = self.deduplicator.deduplicate_clauses(all_clauses)

        advance(AnalysisStage.SYNTHESIZE, "Synthesizing final analysis...")

        synthesis    = self.analysis_client.synthesize(deduplicated, chunk_summaries)

        return AnalysisResult(summary            = synthesis.summary,
                              overall_risk_score = synthesis.overall_risk_score,
                              risk_summary       = synthesis.risk_summary,
                              clauses            = deduplicated,
                              metadata           = {"mode"             : AnalysisStage.CHUNKING.value,
                                                    "chunk_count"      : total,
                                                    "raw_clause_count" : len(all_clauses),
                                                   },
                             )
