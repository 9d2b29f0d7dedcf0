# DEPENDENCIES
import re
import math
from typing import Any
from typing import Dict
from typing import List
from config.settings import settings


class TextProcessor:
    """
    Text processing and normalization utilities
    """
    @staticmethod
    def estimate_token_count(text: str) -> int:
        """
        Approximate token count from character length (fixed English-text ratio)

        Arguments:
        ----------
            text { str } : Input text

        Returns:
        --------
              { int }    : ceil(len(text) / CHARS_PER_TOKEN), 0 for empty text
        """
        if not text:
            return 0

        return math.ceil(len(text) / settings.CHARS_PER_TOKEN)


    @staticmethod
    def clean_extracted_text(text: str) -> str:
        """
        Clean raw extractor output

        Spaces and tabs are collapsed, runs of 3+ newlines become one blank line, every line is trimmed

        Arguments:
        ----------
            text { str } : Raw extracted text

        Returns:
        --------
             { str }     : Cleaned text
        """
        if not text:
            return ""

        text  = re.sub(r'[ \t]+', ' ', text)
        text  = re.sub(r'\n{3,}', '\n\n', text)
        lines = [line.strip() for line in text.split('\n')]

        return '\n'.join(lines).strip()


    @staticmethod
    def split_into_paragraphs(text: str, min_length: int = 1) -> List[str]:
        """
        Split text into paragraphs on blank lines
        """
        paragraphs = re.split(r'\n\s*\n', text)

        return [p.strip() for p in paragraphs if len(p.strip()) >= min_length]


    @staticmethod
    def get_text_statistics(text: str) -> Dict[str, Any]:
        """
        Basic statistics logged before analysis
        """
        words = text.split()

        return {"character_count"  : len(text),
                "word_count"       : len(words),
                "paragraph_count"  : len(TextProcessor.split_into_paragraphs(text)),
                "estimated_tokens" : TextProcessor.estimate_token_count(text),
               }


def estimate_token_count(text: str) -> int:
    return TextProcessor.estimate_token_count(text)
