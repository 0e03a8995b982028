"""
Board file storage.

The file is the database: every command reads it whole and writes it
whole. No lock is held between read and write, so concurrent writers
follow last-writer-wins. Writes go through a temp file + rename so a
reader never sees half a board.
"""
import logging
import os
import tempfile
from pathlib import Path
from typing import Union

from .errors import DocumentUnreadable

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class BoardStore:
    """Reads and writes board documents under a vault directory."""

    def __init__(self, vault_path: PathLike = "."):
        self.vault_path = Path(vault_path)

    def resolve(self, board_path: PathLike) -> Path:
        """Absolute paths pass through; relative ones are joined to the vault."""
        return self.vault_path / board_path

    def exists(self, board_path: PathLike) -> bool:
        return self.resolve(board_path).exists()

    def read_text(self, board_path: PathLike) -> str:
        full = self.resolve(board_path)
        try:
            # newline="" keeps a CRLF board's \r on each line
            with open(full, "r", encoding="utf-8", newline="") as f:
                return f.read()
        except FileNotFoundError:
            raise DocumentUnreadable(str(full), "file not found") from None
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentUnreadable(str(full), str(e)) from e

    def write_text(self, board_path: PathLike, text: str) -> Path:
        """Overwrite the whole file atomically."""
        full = self.resolve(board_path)
        full.parent.mkdir(parents=True, exist_ok=True)
        mode = full.stat().st_mode & 0o777 if full.exists() else 0o644
        fd, tmp_path = tempfile.mkstemp(dir=str(full.parent), suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                os.chmod(tmp_path, mode)
                f.write(text)
            os.replace(tmp_path, full)
        except Exception:
            os.unlink(tmp_path)
            raise
        logger.debug(f"Wrote {len(text)} bytes to {full}")
        return full
