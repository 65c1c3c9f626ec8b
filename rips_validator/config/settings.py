"""
Application settings loaded from environment variables.

Variables:
- RIPS_LOG_LEVEL: logging level (default INFO)
- RIPS_LOG_DIR: directory for log files (default logs)
- RIPS_LOG_TO_FILE: write rotating log files (default false)
- RIPS_REPORT_DIR: directory where report files are written (default reportes)
- RIPS_WRITE_REPORTS: write report files to disk (default true)
- RIPS_RULES_PATH: alternative reference_codes.yaml (default: bundled file)
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration of the validator service"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="RIPS_",  # All settings prefixed with RIPS_
    )

    log_level: str = Field("INFO", description="Logging level")
    log_dir: str = Field("logs", description="Directory for log files")
    log_to_file: bool = Field(False, description="Whether to write rotating log files")
    report_dir: str = Field("reportes", description="Directory for report files")
    write_reports: bool = Field(True, description="Whether to write report files to disk")
    rules_path: Optional[str] = Field(None, description="Override for reference_codes.yaml")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the process-wide settings, read once from the environment."""
    return Settings()
