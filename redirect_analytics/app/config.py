from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..modules.dashboard.pipeline.pagination import PAGE_SIZE_OPTIONS


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    events_path: Path = Field(Path("./data/events.json"), alias="EVENTS_PATH")
    aggregates_path: Path = Field(Path("./data/aggregates.json"), alias="AGGREGATES_PATH")
    export_dir: Path = Field(Path("./data/exports"), alias="EXPORT_DIR")

    page_size: int = Field(25, alias="PAGE_SIZE")
    top_destinations: int = Field(10, ge=1, le=50, alias="TOP_DESTINATIONS")
    recent_window_hours: int = Field(24, ge=1, le=720, alias="RECENT_WINDOW_HOURS")

    chart_layout: Literal["horizontal", "vertical", "grid"] = Field("vertical", alias="CHART_LAYOUT")
    chart_width: int = Field(1200, ge=200, le=4000, alias="CHART_WIDTH")
    chart_height: int = Field(600, ge=200, le=4000, alias="CHART_HEIGHT")
    chart_background: str = Field("#ffffff", alias="CHART_BACKGROUND")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field("INFO", alias="LOG_LEVEL")

    @field_validator("page_size")
    @classmethod
    def _check_page_size(cls, value: int) -> int:
        if value not in PAGE_SIZE_OPTIONS:
            raise ValueError(f"PAGE_SIZE must be one of {PAGE_SIZE_OPTIONS}")
        return value

    @property
    def chart_size(self) -> tuple[int, int]:
        return self.chart_width, self.chart_height

    def ensure_dirs(self) -> None:
        self.export_dir.mkdir(parents=True, exist_ok=True)
