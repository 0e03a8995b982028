"""
Board operation failures.

Every error is raised before the document is written, so a failed
operation never leaves a partially mutated board on disk.
"""
from typing import Optional, Dict, Any


class BoardError(Exception):
    """Base class for failures surfaced to the CLI caller."""

    kind = "BoardError"

    def __init__(self, message: str, **context):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> Dict[str, Any]:
        data = {"success": False, "error": self.kind, "message": self.message}
        data.update({k: v for k, v in self.context.items() if v is not None})
        return data


class ItemNotFound(BoardError):
    """No lane holds an item with the given block id."""

    kind = "ItemNotFound"

    def __init__(self, item_id: str):
        super().__init__(f'Item with id "{item_id}" not found', id=item_id)
        self.item_id = item_id


class LaneNotFound(BoardError):
    """No lane header matches the title (case-insensitive)."""

    kind = "LaneNotFound"

    def __init__(self, lane: str):
        super().__init__(f'Lane "{lane}" not found', lane=lane)
        self.lane = lane


class AlreadyClaimed(BoardError):
    """Claim attempted on an item whose agent field is already set."""

    kind = "AlreadyClaimed"

    def __init__(self, item_id: str, agent: str):
        super().__init__(f'Item "{item_id}" already claimed by "{agent}"', id=item_id, agent=agent)
        self.item_id = item_id
        self.agent = agent


class DocumentUnreadable(BoardError):
    """Board file missing or not readable."""

    kind = "DocumentUnreadable"

    def __init__(self, path: str, reason: Optional[str] = None):
        msg = f"Cannot read board {path}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg, board=path)
        self.path = path


class InvalidField(BoardError):
    """A field key or value that would not survive a write and re-read."""

    kind = "InvalidField"

    def __init__(self, key: str, reason: str):
        super().__init__(f'Invalid field "{key}": {reason}', field=key)
        self.key = key
