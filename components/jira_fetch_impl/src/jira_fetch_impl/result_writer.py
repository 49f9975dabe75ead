"""Persist fetched payloads to local files."""
from __future__ import annotations

import logging
from pathlib import Path

from issue_fetch_interface.errors import ResultWriteError

logger = logging.getLogger(__name__)


class ResultWriter:
    """Writes text files under ``directory`` (the working directory by default)."""

    def __init__(self, directory: str | Path = ".") -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        """Return directory."""
        return self._directory

    def save(self, filename: str, content: str) -> Path:
        """Write ``content`` as UTF-8, replacing any existing file.

        Returns:
            The path that was written.

        Raises:
            ResultWriteError: If the file cannot be opened or written.
        """
        path = self._directory / filename
        try:
            #newline="" keeps the payload byte for byte
            with open(path, "w", encoding="utf-8", newline="") as handle:
                handle.write(content)
        except OSError as exc:
            raise ResultWriteError(filename, f"Error saving file {path}: {exc}") from exc
        logger.info("Saved %s", path)
        return path
