from __future__ import annotations

from pathlib import Path

import aiofiles

from redirect_analytics.modules.dashboard.services.export_service import ExportArtifact


class ArtifactWriter:
    def __init__(self, base_dir: Path) -> None:
        self._base_dir = base_dir

    async def write(self, artifact: ExportArtifact) -> Path:
        self._base_dir.mkdir(parents=True, exist_ok=True)
        # artifact names are generated, never user paths
        path = self._base_dir / Path(artifact.filename).name
        async with aiofiles.open(path, "wb") as f:
            await f.write(artifact.data)
        return path
