"""
File-backed analytics source reading API payloads saved as JSON.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import aiofiles

from redirect_analytics.modules.dashboard.domain.errors import AnalyticsSourceError, SourceConnectionError
from redirect_analytics.modules.dashboard.domain.interfaces import AnalyticsSource


class JsonFileAnalyticsSource(AnalyticsSource):

    def __init__(self, events_path: Path, aggregates_path: Path):
        self.events_path = events_path
        self.aggregates_path = aggregates_path

    async def fetch_events(self) -> Any:
        return await self._read(self.events_path)

    async def fetch_aggregates(self) -> Any:
        return await self._read(self.aggregates_path)

    async def _read(self, path: Path) -> Any:
        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                raw = await f.read()
        except FileNotFoundError:
            raise AnalyticsSourceError(f"Payload not found: {path}", status_code=404) from None
        except OSError as exc:
            raise SourceConnectionError(f"Cannot read {path}: {exc}") from exc

        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise AnalyticsSourceError(f"Invalid JSON in {path}: {exc}", status_code=400) from exc
