# DEPENDENCIES
from typing import Any
from typing import Dict


class ModelConfig:
    """
    Generation parameters for each kind of structured-extraction request
    """
    # Whole-document analysis
    DOCUMENT_ANALYSIS = {"max_tokens"  : 8192,
                         "temperature" : 0.0,
                        }

    # Analysis of one section of a long contract
    CHUNK_ANALYSIS    = {"max_tokens"  : 8192,
                         "temperature" : 0.0,
                        }

    # Final verdict built from chunk findings
    SYNTHESIS         = {"max_tokens"  : 2048,
                         "temperature" : 0.0,
                        }

    # Synthesis prompt digest
    SYNTHESIS_DIGEST  = {"explanation_preview_chars" : 100,
                        }


    @classmethod
    def get_generation_config(cls, request_type: str) -> Dict[str, Any]:
        """
        Get generation parameters for a request type
        """
        config_map = {"document"  : cls.DOCUMENT_ANALYSIS,
                      "chunk"     : cls.CHUNK_ANALYSIS,
                      "synthesis" : cls.SYNTHESIS,
                     }

        return dict(config_map.get(request_type, cls.DOCUMENT_ANALYSIS))
