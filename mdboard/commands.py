"""
Board commands: the operations the CLI exposes.

Each mutating command is one read-parse-mutate-write cycle. Errors are
raised before the write, so a failing command leaves the file as it was.
Results are plain dicts ready for json.dumps.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from . import engine
from .config import Config
from .errors import AlreadyClaimed, InvalidField
from .ids import dated_archive_path, generate_block_id
from .parser import line_ending, read_board
from .render import join_lines, validate_fields
from .schema import Board, Item, TaskStatus
from .store import BoardStore

logger = logging.getLogger(__name__)


def utc_today() -> str:
    return datetime.now(timezone.utc).date().isoformat()


class BoardCommands:
    """Runs board operations against files in a BoardStore."""

    def __init__(
        self,
        store: BoardStore,
        cfg: Optional[Config] = None,
        today: Optional[Callable[[], str]] = None,
    ):
        self.store = store
        self.cfg = cfg or Config()
        self.today = today or utc_today

    # ──────────────────────────────────────────
    # I/O helpers
    # ──────────────────────────────────────────

    def _read(self, board_path: str) -> Board:
        return read_board(self.store.read_text(board_path))

    def _write(self, board_path: str, lines: List[str], op: str, item_id: str) -> None:
        self.store.write_text(board_path, join_lines(lines))
        logger.info(f"{op} {item_id} -> {board_path}")

    # ──────────────────────────────────────────
    # Queries
    # ──────────────────────────────────────────

    def board_status(self, board_path: str) -> Dict[str, Any]:
        board = self._read(board_path)
        return {"board": board_path, "lanes": engine.summarize(board)}

    def list_items(
        self,
        board_path: str,
        lane: Optional[str] = None,
        agent: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        board = self._read(board_path)
        return [i.to_dict() for i in engine.list_items(board, lane=lane, agent=agent)]

    # ──────────────────────────────────────────
    # Lane transitions
    # ──────────────────────────────────────────

    def claim(self, board_path: str, item_id: str, agent: str) -> Dict[str, Any]:
        """Ready -> In Progress, recording the claiming agent."""
        validate_fields({"agent": agent})
        board = self._read(board_path)
        item = engine.find_item(board, item_id)
        if item.agent:
            raise AlreadyClaimed(item_id, item.agent)

        status = TaskStatus.IN_PROGRESS.value
        fields = {"agent": agent, "status": status, "claimed_at": self.today()}
        lines = engine.move_item(
            board, item_id, self.cfg.lane_in_progress, fields,
            tag_patch=engine.update_status_tags(item.tags, status),
        )
        self._write(board_path, lines, "claim", item_id)
        return {"success": True, "id": item_id, "agent": agent, "lane": self.cfg.lane_in_progress}

    def update(
        self,
        board_path: str,
        item_id: str,
        status: str,
        note: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Set status (and its tag) in place; no lane change."""
        board = self._read(board_path)
        item = engine.find_item(board, item_id)

        fields = {"status": status}
        if note:
            fields["note"] = note
        validate_fields(fields)
        lines = engine.update_fields(
            board, item_id, fields,
            tag_patch=engine.update_status_tags(item.tags, status),
        )
        self._write(board_path, lines, "update", item_id)
        return {"success": True, "id": item_id, "status": status}

    def complete(self, board_path: str, item_id: str) -> Dict[str, Any]:
        """Check the box and move to Done."""
        board = self._read(board_path)
        item = engine.find_item(board, item_id)

        status = TaskStatus.COMPLETE.value
        fields = {"status": status, "completed_at": self.today()}
        lines = engine.move_item(
            board, item_id, self.cfg.lane_done, fields,
            tag_patch=engine.update_status_tags(item.tags, status),
            checked=True,
        )
        self._write(board_path, lines, "complete", item_id)
        return {"success": True, "id": item_id, "lane": self.cfg.lane_done}

    def fail(self, board_path: str, item_id: str, reason: Optional[str] = None) -> Dict[str, Any]:
        board = self._read(board_path)
        item = engine.find_item(board, item_id)

        status = TaskStatus.FAILED.value
        fields = {"status": status}
        if reason:
            fields["reason"] = reason
        validate_fields(fields)
        lines = engine.move_item(
            board, item_id, self.cfg.lane_failed, fields,
            tag_patch=engine.update_status_tags(item.tags, status),
        )
        self._write(board_path, lines, "fail", item_id)
        return {"success": True, "id": item_id, "lane": self.cfg.lane_failed}

    # ──────────────────────────────────────────
    # Creation / removal
    # ──────────────────────────────────────────

    def add_task(
        self,
        board_path: str,
        title: str,
        lane: Optional[str] = None,
        priority: Optional[str] = None,
        fields: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """Append a new task to a lane (Ready by default)."""
        lane = lane or self.cfg.lane_ready
        if "\n" in title or "\r" in title:
            raise InvalidField("title", "line break in title")
        item_fields = dict(fields or {})
        if priority:
            item_fields["priority"] = priority
        validate_fields(item_fields)

        board = self._read(board_path)
        engine.find_lane(board, lane)
        block_id = generate_block_id(
            board.block_ids(), prefix=self.cfg.id_prefix, length=self.cfg.id_length,
        )
        lines = engine.insert_item(board, lane, title, item_fields, block_id, tags=[self.cfg.task_tag])
        self._write(board_path, lines, "add-task", block_id)
        return {"success": True, "id": block_id, "lane": lane, "title": title}

    def archive(self, board_path: str, lane: Optional[str] = None) -> Dict[str, Any]:
        """
        Move every item of a lane (Done by default) into a dated archive board.

        The archive is named after the earliest `completed_at` date of the
        archived items through today. An existing file with that name is
        never overwritten: `-2`, `-3`, ... are probed until one is free.
        """
        lane = lane or self.cfg.lane_done
        board = self._read(board_path)
        lines, items = engine.remove_lane_items(board, lane)
        if not items:
            return {"success": True, "archived": 0, "ids": [], "archive": None}

        today = self.today()
        start = min([d for d in map(_item_date, items) if d] + [today])
        target = dated_archive_path(
            self.cfg.archive_dir, start, today,
            exists=self.store.exists,
        )
        header = engine.find_lane(board, lane)
        eol = line_ending(board.lines[header.start_line])
        archive_lines = [f"## {header.title}{eol}", eol] + [i.raw for i in items]

        self.store.write_text(target, join_lines(archive_lines))
        self._write(board_path, lines, "archive", f"{len(items)} items")
        return {
            "success": True,
            "archived": len(items),
            "ids": [i.block_id for i in items if i.block_id],
            "archive": str(target),
        }


def _item_date(item: Item) -> Optional[str]:
    value = item.fields.get("completed_at", "")
    try:
        return datetime.strptime(value[:10], "%Y-%m-%d").date().isoformat()
    except ValueError:
        return None


def parse_fields_arg(raw: str) -> Dict[str, str]:
    """Parse `key=val,key2=val2`; pairs without a key are skipped."""
    result: Dict[str, str] = {}
    for pair in raw.split(","):
        key, sep, value = pair.partition("=")
        if sep and key.strip():
            result[key.strip()] = value.strip()
    return result
