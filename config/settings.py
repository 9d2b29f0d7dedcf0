# DEPENDENCIES
from pathlib import Path
from pydantic import Field
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application-wide settings: primary configuration source
    """
    # Application Info
    APP_NAME                  : str           = "Contract Risk Analyzer"
    APP_VERSION               : str           = "1.0.0"
    API_PREFIX                : str           = "/api/v1"

    # Server Configuration
    HOST                      : str           = "0.0.0.0"
    PORT                      : int           = 8000
    RELOAD                    : bool          = False
    WORKERS                   : int           = 1

    # CORS Settings
    CORS_ORIGINS              : list          = ["http://localhost:3000", "http://localhost:8000", "http://127.0.0.1:8000"]
    CORS_ALLOW_CREDENTIALS    : bool          = True
    CORS_ALLOW_METHODS        : list          = ["*"]
    CORS_ALLOW_HEADERS        : list          = ["*"]

    # File Upload Settings
    MAX_UPLOAD_SIZE           : int           = 10 * 1024 * 1024  # 10 MB
    ALLOWED_EXTENSIONS        : list          = [".pdf", ".docx"]

    # Anthropic API Settings
    ANTHROPIC_API_KEY         : Optional[str] = None
    LLM_MODEL                 : str           = "claude-sonnet-4-20250514"
    LLM_TIMEOUT               : float         = 600.0
    LLM_MAX_RETRIES           : int           = 2
    LLM_REQUESTS_PER_MINUTE   : int           = Field(default = 30, ge = 1)

    # Chunking Settings
    MAX_TOKENS_PER_CHUNK      : int           = Field(default = 80000, ge = 1)
    OVERLAP_CHARS             : int           = Field(default = 2000, ge = 0)
    CHARS_PER_TOKEN           : int           = 4

    # Extraction Limits
    MIN_EXTRACTED_TEXT_LENGTH : int           = 50      # Below this the document is rejected before analysis
    MAX_CONTRACT_LENGTH       : int           = 2000000 # Maximum characters accepted for pasted text

    # Logging Settings
    LOG_LEVEL                 : str           = "INFO"
    LOG_DIR                   : Path          = Path("logs")
    LOG_MAX_BYTES             : int           = 5 * 1024 * 1024
    LOG_BACKUP_COUNT          : int           = 3


    class Config:
        env_file          = ".env"
        env_file_encoding = "utf-8"
        case_sensitive    = True
        extra             = "ignore"


# Global settings instance
settings = Settings()
