"""
JSON file holding the routing config.
"""
import asyncio
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from ..models import RoutingConfig
from .base import ConfigUnavailableError, decode_config, encode_config

logger = logging.getLogger(__name__)


class FileConfigStore:
    """Routing config kept in a single JSON file; a missing file means no config."""

    def __init__(self, path: str):
        self.path = Path(path)

    def load_config(self) -> Optional[RoutingConfig]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise ConfigUnavailableError(f"Cannot read {self.path}: {exc}") from exc
        return decode_config(raw)

    def save_config(self, config: RoutingConfig) -> None:
        """Write atomically so concurrent readers never see a partial file."""
        directory = self.path.parent
        tmp_path = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(encode_config(config))
            os.replace(tmp_path, self.path)
        except OSError as exc:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise ConfigUnavailableError(f"Cannot write {self.path}: {exc}") from exc
        logger.info(f"Wrote routing config to {self.path}")

    async def get_config(self) -> Optional[RoutingConfig]:
        return await asyncio.to_thread(self.load_config)
