"""Local file storage for portfolio uploads."""

from __future__ import annotations

import asyncio
import re
from pathlib import Path
from typing import Protocol
from uuid import uuid4

import structlog
from compass.core.config import get_settings

logger = structlog.get_logger()

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class FileStorageError(Exception):
    """Raised when an upload cannot be stored."""


class FileStorageProtocol(Protocol):
    async def save(self, filename: str, content: bytes) -> str:
        """Store ``content`` and return its public URL."""
        ...


class LocalFileStorage:
    """Writes uploads under ``UPLOAD_DIR`` and serves them from ``UPLOAD_BASE_URL``."""

    def __init__(
        self,
        root: str | Path | None = None,
        base_url: str | None = None,
        max_bytes: int | None = None,
    ) -> None:
        settings = get_settings()
        self.root = Path(root or settings.upload_dir)
        self.base_url = (base_url or settings.upload_base_url).rstrip("/")
        self.max_bytes = max_bytes or settings.upload_max_bytes

    async def save(self, filename: str, content: bytes) -> str:
        if not content:
            raise FileStorageError("Uploaded file is empty")
        if len(content) > self.max_bytes:
            raise FileStorageError(f"Uploaded file exceeds {self.max_bytes} bytes")

        stored_name = f"{uuid4().hex}_{_safe_name(filename)}"
        destination = self.root / stored_name
        await asyncio.to_thread(self._write, destination, content)

        await logger.ainfo("file_uploaded", stored_name=stored_name, size=len(content))
        return f"{self.base_url}/{stored_name}"

    @staticmethod
    def _write(destination: Path, content: bytes) -> None:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(content)


def _safe_name(filename: str) -> str:
    name = Path(filename or "upload").name
    return _UNSAFE_CHARS.sub("_", name)[:120] or "upload"
