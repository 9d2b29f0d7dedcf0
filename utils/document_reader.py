# DEPENDENCIES
import io
import math
import docx
from typing import List
from typing import Optional
from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError
from utils.logger import log_info
from utils.logger import log_warning
from utils.text_processor import TextProcessor
from services.exceptions import ExtractionError
from services.data_models import ExtractionResult
from services.exceptions import UnsupportedFileTypeError


PDF_CONTENT_TYPE  = "application/pdf"
DOCX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class DocumentReader:
    """
    Text extraction for uploaded contracts (PDF and DOCX)

    Extraction quality is best effort; scanned documents are flagged, not OCR'd
    """
    SUPPORTED_TYPES         = ("pdf", "docx")
    SCANNED_CHARS_PER_PAGE  = 100   # PDF pages averaging less text than this are treated as scanned
    SCANNED_DOCX_CHARS      = 100
    DOCX_CHARS_PER_PAGE     = 3000  # DOCX has no real page count


    @staticmethod
    def detect_file_type(content_type: Optional[str] = None, file_name: Optional[str] = None) -> Optional[str]:
        """
        Detect file type from the declared content type, falling back to the file extension

        Returns:
        --------
            { str } : "pdf", "docx" or None when the type cannot be determined
        """
        if (content_type == PDF_CONTENT_TYPE):
            return "pdf"

        if (content_type == DOCX_CONTENT_TYPE):
            return "docx"

        if file_name and ("." in file_name):
            extension = file_name.lower().rsplit(".", 1)[-1]

            if extension in DocumentReader.SUPPORTED_TYPES:
                return extension

        return None


    def extract_text(self, content: bytes, file_type: str) -> ExtractionResult:
        """
        Extract text from a document buffer

        Arguments:
        ----------
            content   { bytes } : Raw document bytes

            file_type { str }   : "pdf" or "docx"

        Returns:
        --------
            { ExtractionResult } : Cleaned text, page count, scanned flag and warning

        Raises:
        -------
            UnsupportedFileTypeError : file_type is not supported

            ExtractionError          : the document could not be parsed
        """
        if (file_type == "pdf"):
            result = self._extract_pdf(content)

        elif (file_type == "docx"):
            result = self._extract_docx(content)

        else:
            raise UnsupportedFileTypeError(f"Unsupported file type: {file_type}")

        result.token_estimate = TextProcessor.estimate_token_count(result.text)

        log_info("Text extracted",
                 file_type      = file_type,
                 page_count     = result.page_count,
                 text_length    = len(result.text),
                 token_estimate = result.token_estimate,
                 is_scanned     = result.is_scanned,
                )

        if result.warning:
            log_warning("Extraction warning", file_type = file_type, warning = result.warning)

        return result


    def _extract_pdf(self, content: bytes) -> ExtractionResult:
        try:
            reader     = PdfReader(io.BytesIO(content))
            page_texts = [page.extract_text() or "" for page in reader.pages]

        except (PdfReadError, ValueError, KeyError, TypeError) as e:
            raise ExtractionError(f"Failed to extract text from PDF: {e}") from e

        page_count  = len(page_texts)
        total_chars = sum(len(page_text.strip()) for page_text in page_texts)
        text        = TextProcessor.clean_extracted_text("\n\n".join(page_texts))

        is_scanned  = (page_count == 0) or ((total_chars / page_count) < self.SCANNED_CHARS_PER_PAGE)
        warning     = None

        if is_scanned:
            warning = "This appears to be a scanned document. Text extraction may be incomplete or inaccurate. Consider using a document with selectable text."

        return ExtractionResult(text       = text,
                                page_count = page_count,
                                is_scanned = is_scanned,
                                warning    = warning,
                               )


    def _extract_docx(self, content: bytes) -> ExtractionResult:
        try:
            document = docx.Document(io.BytesIO(content))

        except Exception as e:
            # python-docx surfaces zip, XML and package errors with unrelated types
            raise ExtractionError(f"Failed to extract text from DOCX: {e}") from e

        blocks     = [paragraph.text for paragraph in document.paragraphs]
        blocks.extend(self._table_lines(document))

        text       = TextProcessor.clean_extracted_text("\n".join(blocks))
        page_count = max(1, math.ceil(len(text) / self.DOCX_CHARS_PER_PAGE))
        is_scanned = len(text) < self.SCANNED_DOCX_CHARS
        warning    = None

        if is_scanned:
            warning = "This document contains very little text. It may be image-based or empty."

        return ExtractionResult(text       = text,
                                page_count = page_count,
                                is_scanned = is_scanned,
                                warning    = warning,
                               )


    @staticmethod
    def _table_lines(document) -> List[str]:
        lines = list()

        for table in document.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]

                if cells:
                    lines.append(" | ".join(cells))

        return lines
