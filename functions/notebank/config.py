"""
Configuration and settings for the grid record store.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from notebank.cell_chunks import CELL_CHAR_LIMIT


class Settings(BaseSettings):
    """Environment-backed settings; field names double as env var names."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Spreadsheet ids
    question_bank_spreadsheet_id: Optional[str] = Field(default=None)
    practical_tasks_spreadsheet_id: Optional[str] = Field(default=None)
    work_summary_spreadsheet_id: Optional[str] = Field(default=None)
    kanban_board_spreadsheet_id: Optional[str] = Field(default=None)
    notes_spreadsheet_id: Optional[str] = Field(default=None)
    # Tags live on the kanban board spreadsheet unless given their own.
    tags_spreadsheet_id: Optional[str] = Field(default=None)

    # Google service account (inline JSON wins over the key file)
    google_service_account_json: Optional[str] = Field(default=None)
    google_service_account_file: Optional[str] = Field(default=None)

    cell_char_limit: int = Field(default=CELL_CHAR_LIMIT, ge=1)

    # Development toggles
    use_in_memory_backends: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    @property
    def resolved_tags_spreadsheet_id(self) -> Optional[str]:
        return self.tags_spreadsheet_id or self.kanban_board_spreadsheet_id

    @property
    def has_google_credentials(self) -> bool:
        return bool(self.google_service_account_json or self.google_service_account_file)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
