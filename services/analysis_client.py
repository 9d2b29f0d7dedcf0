# DEPENDENCIES
from typing import List
from typing import Optional
from utils.logger import log_info
from config.model_config import ModelConfig
from model_manager.llm_manager import LLMManager
from services.data_models import ClauseResult
from services.data_models import AnalysisResult
from services.data_models import SynthesisResult
from services.prompt_builder import SYNTHESIS_TOOL
from services.prompt_builder import CLAUSE_ANALYSIS_TOOL
from services.prompt_builder import build_analysis_prompt
from services.prompt_builder import build_synthesis_prompt
from services.prompt_builder import build_chunk_analysis_prompt
from services.response_schemas import parse_analysis_payload
from services.response_schemas import parse_synthesis_payload


class AnalysisClient:
    """
    The three structured-extraction requests of the analysis pipeline : whole document, one chunk, synthesis

    Every answer is validated against the fixed schema; a missing or malformed payload raises instead of
    falling back to defaults.
    """
    def __init__(self, llm_manager: LLMManager):
        """
        Initialize analysis client

        Arguments:
        ----------
            llm_manager { LLMManager } : Configured structured-extraction manager
        """
        self.llm_manager = llm_manager


    @classmethod
    def from_settings(cls, api_key: Optional[str] = None) -> "AnalysisClient":
        """
        Build a client from application settings; raises ConfigurationError when no API key is configured
        """
        return cls(LLMManager(api_key = api_key))


    def analyze_document(self, full_text: str) -> AnalysisResult:
        """
        Analyze a contract that fits in a single request
        """
        generation = ModelConfig.get_generation_config("document")
        response   = self.llm_manager.extract_structured(prompt = build_analysis_prompt(full_text),
                                                         tool   = CLAUSE_ANALYSIS_TOOL,
                                                         **generation,
                                                        )

        result     = parse_analysis_payload(response.tool_input)

        log_info("Document analysis received",
                 num_clauses        = len(result.clauses),
                 overall_risk_score = result.overall_risk_score,
                )

        return result


    def analyze_chunk(self, chunk_text: str, chunk_index: int, total_chunks: int) -> AnalysisResult:
        """
        Analyze one section of a long contract

        Arguments:
        ----------
            chunk_text   { str } : Section text

            chunk_index  { int } : 1-based position of the section

            total_chunks { int } : Number of sections in the contract
        """
        generation = ModelConfig.get_generation_config("chunk")
        response   = self.llm_manager.extract_structured(prompt = build_chunk_analysis_prompt(chunk_text, chunk_index, total_chunks),
                                                         tool   = CLAUSE_ANALYSIS_TOOL,
                                                         **generation,
                                                        )

        result     = parse_analysis_payload(response.tool_input)

        log_info("Chunk analysis received",
                 chunk_index  = chunk_index,
                 total_chunks = total_chunks,
                 num_clauses  = len(result.clauses),
                )

        return result


    def synthesize(self, all_clauses: List[ClauseResult], chunk_summaries: List[str]) -> SynthesisResult:
        """
        Turn deduplicated clauses and per-section summaries into one document-level verdict
        """
        generation = ModelConfig.get_generation_config("synthesis")
        response   = self.llm_manager.extract_structured(prompt = build_synthesis_prompt(all_clauses, chunk_summaries),
                                                         tool   = SYNTHESIS_TOOL,
                                                         **generation,
                                                        )

        synthesis  = parse_synthesis_payload(response.tool_input)

        log_info("Synthesis received", overall_risk_score = synthesis.overall_risk_score)

        return synthesis
