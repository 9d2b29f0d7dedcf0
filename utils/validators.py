# DEPENDENCIES
from typing import Optional
from pathlib import Path
from config.settings import settings
from services.data_models import ExtractionResult
from services.exceptions import InvalidUploadError
from services.exceptions import UnsupportedFileTypeError
from services.exceptions import ExtractionInsufficientError


class ContractValidator:
    """
    Validate uploads and extracted text before any analysis request is made
    """
    @staticmethod
    def validate_upload(file_name: Optional[str], file_size: int, max_size: Optional[int] = None) -> str:
        """
        Validate an uploaded file's name and size

        Arguments:
        ----------
            file_name { str } : Original file name

            file_size { int } : Size in bytes

            max_size  { int } : Size limit override (default: settings.MAX_UPLOAD_SIZE)

        Returns:
        --------
            { str }           : Lowercased file extension, e.g. ".pdf"
        """
        if not file_name:
            raise InvalidUploadError("No file name provided")

        extension = Path(file_name).suffix.lower()

        if extension not in settings.ALLOWED_EXTENSIONS:
            raise UnsupportedFileTypeError(f"Invalid file type '{extension or file_name}'. Allowed: {', '.join(settings.ALLOWED_EXTENSIONS)}")

        if (file_size == 0):
            raise InvalidUploadError("File is empty (0 bytes)")

        max_size = max_size or settings.MAX_UPLOAD_SIZE

        if (file_size > max_size):
            raise InvalidUploadError(f"File too large ({file_size / (1024 * 1024):.1f}MB). Maximum size: {max_size / (1024 * 1024):.1f}MB")

        return extension


    @staticmethod
    def validate_extracted_text(extraction: ExtractionResult, min_length: Optional[int] = None):
        """
        Reject extractions too short to analyze

        The message tells a scanned (image-based) document apart from an empty or corrupted one
        """
        min_length  = min_length or settings.MIN_EXTRACTED_TEXT_LENGTH
        text_length = len(extraction.text.strip())

        if (text_length >= min_length):
            return

        if extraction.is_scanned:
            message = "Could not extract sufficient text. This appears to be a scanned or image-based document. Please upload a document with selectable text."

        else:
            message = "Could not extract sufficient text from the document. The file may be empty or corrupted."

        raise ExtractionInsufficientError(message, is_scanned = extraction.is_scanned, text_length = text_length)


    @staticmethod
    def validate_contract_text(text: Optional[str], min_length: Optional[int] = None, max_length: Optional[int] = None) -> str:
        """
        Validate pasted contract text and return it stripped
        """
        min_length = min_length or settings.MIN_EXTRACTED_TEXT_LENGTH
        max_length = max_length or settings.MAX_CONTRACT_LENGTH
        text       = (text or "").strip()

        if (len(text) < min_length):
            raise ExtractionInsufficientError(f"Text too short ({len(text)} chars, minimum {min_length})", text_length = len(text))

        if (len(text) > max_length):
            raise InvalidUploadError(f"Text too long ({len(text)} chars, maximum {max_length})")

        return text
