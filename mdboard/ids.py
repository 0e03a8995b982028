"""
Identifier generation and name disambiguation.
"""
import secrets
import string
from pathlib import Path
from typing import Callable, Iterable, Optional

ID_ALPHABET = string.digits + string.ascii_lowercase
DEFAULT_ID_LENGTH = 9


def generate_block_id(
    existing: Iterable[str] = (),
    prefix: Optional[str] = None,
    length: int = DEFAULT_ID_LENGTH,
) -> str:
    """Random base36 token, regenerated until it is not already in `existing`."""
    taken = set(existing)
    while True:
        token = "".join(secrets.choice(ID_ALPHABET) for _ in range(length))
        block_id = f"{prefix}-{token}" if prefix else token
        if block_id not in taken:
            return block_id


def unique_path(path: Path, exists: Optional[Callable[[Path], bool]] = None) -> Path:
    """
    Return `path`, or the first free `stem-N.suffix` with N = 2, 3, ...

    Used wherever the natural name (a date) may already be taken.
    """
    exists = exists or Path.exists
    path = Path(path)
    candidate = path
    counter = 1
    while exists(candidate):
        counter += 1
        candidate = path.with_name(f"{path.stem}-{counter}{path.suffix}")
    return candidate


def dated_archive_path(
    archive_dir: Path,
    start_date: str,
    end_date: str,
    exists: Optional[Callable[[Path], bool]] = None,
) -> Path:
    """`<dir>/<date>.md`, or `<dir>/<start>-to-<end>.md` for a range, made unique."""
    name = start_date if start_date == end_date else f"{start_date}-to-{end_date}"
    return unique_path(Path(archive_dir) / f"{name}.md", exists)
