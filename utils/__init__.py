# DEPENDENCIES
from .logger import ContractAnalyzerLogger
from .text_processor import TextProcessor
from .validators import ContractValidator
from .document_reader import DocumentReader


__all__ = ['DocumentReader',
           'TextProcessor',
           'ContractValidator',
           'ContractAnalyzerLogger',
          ]
