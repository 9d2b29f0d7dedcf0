# DEPENDENCIES
import math
from typing import List
from typing import Tuple
from typing import Optional
from utils.logger import log_info
from config.settings import settings
from services.data_models import Chunk
from utils.text_processor import TextProcessor


class ChunkSplitter:
    """
    Splits long contract text into overlapping, boundary-aligned chunks that fit the analysis token budget

    Cuts prefer a paragraph break, then a sentence break, in the second half of the chunk budget; otherwise
    the text is cut at the budget. Consecutive windows share OVERLAP_CHARS characters so a clause spanning a
    cut is seen whole by at least one chunk.
    """
    PARAGRAPH_BREAK     = "\n\n"
    SENTENCE_BREAK      = ". "
    MIN_BOUNDARY_RATIO  = 0.5
    MIN_REMAINDER_CHARS = 100

    def __init__(self, max_tokens_per_chunk: Optional[int] = None, overlap_chars: Optional[int] = None):
        """
        Initialize chunk splitter

        Arguments:
        ----------
            max_tokens_per_chunk { int } : Token budget of one chunk (default: settings.MAX_TOKENS_PER_CHUNK)

            overlap_chars        { int } : Characters re-included at the start of the next chunk (default: settings.OVERLAP_CHARS)
        """
        self.max_tokens_per_chunk = max_tokens_per_chunk or settings.MAX_TOKENS_PER_CHUNK
        self.overlap_chars        = settings.OVERLAP_CHARS if overlap_chars is None else overlap_chars


    def split_into_chunks(self, text: str) -> List[str]:
        """
        Split text into chunk strings

        Arguments:
        ----------
            text { str } : Full contract text

        Returns:
        --------
            { list }     : Chunk texts in document order; [text] unchanged when it fits one chunk
        """
        return [chunk.text for chunk in self.build_chunks(text)]


    def build_chunks(self, text: str) -> List[Chunk]:
        """
        Split text into Chunk objects carrying their position and source window
        """
        estimated_tokens = TextProcessor.estimate_token_count(text)

        if (estimated_tokens <= self.max_tokens_per_chunk):
            return [Chunk(text = text, index = 1, total = 1, start_pos = 0, end_pos = len(text))]

        chars_per_token     = len(text) / estimated_tokens
        max_chars_per_chunk = max(1, math.floor(self.max_tokens_per_chunk * chars_per_token))
        windows             = self._compute_windows(text, max_chars_per_chunk)

        pieces              = list()

        for start, end in windows:
            chunk_text = text[start:end].strip()

            if chunk_text:
                pieces.append((start, end, chunk_text))

        # Whitespace-only input over the budget still yields one chunk
        if not pieces:
            return [Chunk(text = text, index = 1, total = 1, start_pos = 0, end_pos = len(text))]

        total  = len(pieces)
        chunks = [Chunk(text = chunk_text, index = i, total = total, start_pos = start, end_pos = end) for i, (start, end, chunk_text) in enumerate(pieces, start = 1)]

        log_info("Contract split into chunks",
                 text_length         = len(text),
                 estimated_tokens    = estimated_tokens,
                 max_chars_per_chunk = max_chars_per_chunk,
                 overlap_chars       = self.overlap_chars,
                 num_chunks          = total,
                )

        return chunks


    def _compute_windows(self, text: str, max_chars_per_chunk: int) -> List[Tuple[int, int]]:
        """
        Walk the text and return [start, end) windows covering all of it
        """
        text_length = len(text)
        windows     = list()
        start       = 0

        while (start < text_length):
            end = self._find_chunk_end(text, start, max_chars_per_chunk)
            windows.append((start, end))

            if (end >= text_length):
                break

            next_start = max(end - self.overlap_chars, 0)

            # The window must move forward even when the cut lands inside the overlap
            if (next_start <= start):
                next_start = end

            # A tiny remainder is folded into the last window instead of becoming its own chunk
            if (next_start >= text_length - self.MIN_REMAINDER_CHARS):
                windows[-1] = (start, text_length)
                break

            start = next_start

        return windows


    def _find_chunk_end(self, text: str, start: int, max_chars_per_chunk: int) -> int:
        """
        End offset of the window starting at `start`, aligned to a paragraph or sentence break when possible
        """
        end = min(start + max_chars_per_chunk, len(text))

        if (end >= len(text)):
            return end

        min_boundary    = start + max_chars_per_chunk * self.MIN_BOUNDARY_RATIO

        paragraph_break = text.rfind(self.PARAGRAPH_BREAK, start, end + 1)

        if ((paragraph_break != -1) and (paragraph_break >= min_boundary)):
            return paragraph_break

        sentence_break  = text.rfind(self.SENTENCE_BREAK, start, end + 1)

        if ((sentence_break != -1) and (sentence_break >= min_boundary)):
            # Keep the period with the chunk
            return sentence_break + 1

        return end
