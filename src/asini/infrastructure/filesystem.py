"""File store — rename, write and read primitives for package directories.

Each operation has a blocking form (``*_sync``) and an awaitable form
that runs the blocking call in a worker thread.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

from asini.errors import ParseError


class FileStore:
    """Thin pathlib wrapper; the mock seam for filesystem effects."""

    def exists(self, path: Path) -> bool:
        return Path(path).exists()

    def rename_sync(self, src: Path, dst: Path) -> None:
        Path(src).rename(dst)

    async def rename(self, src: Path, dst: Path) -> None:
        await asyncio.to_thread(self.rename_sync, src, dst)

    def write_file_sync(self, path: Path, content: str) -> None:
        Path(path).write_text(content, encoding="utf-8")

    async def write_file(self, path: Path, content: str) -> None:
        await asyncio.to_thread(self.write_file_sync, path, content)

    def read_json(self, path: Path) -> Any:
        """Read and decode a JSON file.

        Raises:
            FileNotFoundError: *path* does not exist.
            ParseError: the file is not valid JSON.
        """
        raw = Path(path).read_text(encoding="utf-8")
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            msg = f"Invalid JSON in {path}: {exc}"
            raise ParseError(msg) from exc
