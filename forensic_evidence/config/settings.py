"""Core application settings."""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CoreSettings(BaseSettings):
    """Core settings for chunking, citation and validation."""

    # Application Settings
    app_name: str = "Forensic Evidence Core - citation addressing and redaction rule gate"
    app_version: str = "0.1.0"
    environment: str = "development"
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # Chunking
    target_chunk_size: int = Field(default=500, validation_alias="TARGET_CHUNK_SIZE")
    max_chunk_size: int = Field(default=1000, validation_alias="MAX_CHUNK_SIZE")
    min_chunk_size: int = Field(default=50, validation_alias="MIN_CHUNK_SIZE")
    split_lookback: int = Field(default=100, validation_alias="SPLIT_LOOKBACK")

    # Citations
    fuzzy_match_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    fuzzy_min_token_length: int = 3

    # Validation
    rule_table_path: Optional[str] = Field(default=None, validation_alias="RULE_TABLE_PATH")
    log_excerpt_max_chars: int = 500
    content_hash_algorithm: str = Field(default="sha256", validation_alias="CONTENT_HASH_ALGORITHM")

    # Revalidation sweeps
    revalidation_max_workers: int = Field(default=4, validation_alias="REVALIDATION_MAX_WORKERS")
    revalidation_timeout_seconds: float = Field(
        default=60.0, validation_alias="REVALIDATION_TIMEOUT_SECONDS"
    )

    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).resolve().parent.parent.parent / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


settings = CoreSettings()
