"""
Mutation engine.

Every operation takes a parsed Board and returns a new line buffer; the
board passed in is never modified. Lookups run before any splice, so a
failed operation produces no buffer at all.

Moving an item is delete-then-insert. Deleting a line shifts everything
below it up by one, so the target lane range is corrected with
adjust_range_after_removal() before the insertion point is computed.
"""
from typing import Dict, List, Optional, Tuple

from .errors import ItemNotFound, LaneNotFound
from .parser import is_item_line, lane_title, line_ending
from .render import build_item_line, render_line
from .schema import Board, Item, Lane, TaskStatus

TASK_TAG = "agent-task"


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Lookups
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def find_item(board: Board, item_id: str) -> Item:
    for item in board.all_items():
        if item.block_id == item_id:
            return item
    raise ItemNotFound(item_id)


def find_lane(board: Board, title: str) -> Lane:
    """Case-insensitive lane lookup."""
    for lane in board.lanes:
        if lane.matches(title):
            return lane
    raise LaneNotFound(title)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Line arithmetic
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def adjust_range_after_removal(start: int, end: int, removed_index: int) -> Tuple[int, int]:
    """Shift a half-open lane range to account for one deleted line."""
    if removed_index < start:
        return start - 1, end - 1
    if removed_index < end:
        return start, end - 1
    return start, end


def find_insertion_point(lines: List[str], start: int, end: int) -> int:
    """
    One past the last item line of the lane starting at `start`.

    Defaults to the line right after the header and never walks past
    the next header.
    """
    insert_at = start + 1
    for i in range(start + 1, min(end, len(lines))):
        if is_item_line(lines[i]):
            insert_at = i + 1
        elif lane_title(lines[i]) is not None:
            break
    return insert_at


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Status tags
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def update_status_tags(tags: List[str], status: str) -> List[str]:
    """Drop every status tag, then add the one for `status` if it has one."""
    status_tags = TaskStatus.tags()
    updated = [t for t in tags if t not in status_tags]
    if status in status_tags:
        updated.append(status)
    return updated


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Mutations
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def update_fields(
    board: Board,
    item_id: str,
    field_patch: Dict[str, str],
    tag_patch: Optional[List[str]] = None,
    checked: Optional[bool] = None,
) -> List[str]:
    """Rewrite one item's line in place."""
    item = find_item(board, item_id)
    lines = list(board.lines)
    lines[item.line_index] = build_item_line(item, field_patch, tag_patch, checked)
    return lines


def move_item(
    board: Board,
    item_id: str,
    target_lane: str,
    field_patch: Dict[str, str],
    tag_patch: Optional[List[str]] = None,
    checked: Optional[bool] = None,
) -> List[str]:
    """Rewrite an item and relocate it to the end of another lane."""
    item = find_item(board, item_id)
    lane = find_lane(board, target_lane)
    new_line = build_item_line(item, field_patch, tag_patch, checked)

    lines = list(board.lines)
    del lines[item.line_index]
    start, end = adjust_range_after_removal(lane.start_line, lane.end_line, item.line_index)
    lines.insert(find_insertion_point(lines, start, end), new_line)
    return lines


def insert_item(
    board: Board,
    lane_name: str,
    title: str,
    fields: Optional[Dict[str, str]],
    block_id: str,
    tags: Optional[List[str]] = None,
) -> List[str]:
    """Append a new unchecked item to a lane."""
    lane = find_lane(board, lane_name)
    line = render_line(
        title.strip(),
        fields=fields,
        tags=[TASK_TAG] if tags is None else tags,
        block_id=block_id,
        ending=line_ending(board.lines[lane.start_line]),
    )
    lines = list(board.lines)
    lines.insert(find_insertion_point(lines, lane.start_line, lane.end_line), line)
    return lines


def remove_lane_items(board: Board, lane_name: str) -> Tuple[List[str], List[Item]]:
    """Drop every item line of a lane. Returns the new buffer and the removed items."""
    lane = find_lane(board, lane_name)
    removed = {item.line_index for item in lane.items}
    lines = [line for i, line in enumerate(board.lines) if i not in removed]
    return lines, list(lane.items)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Read-only queries
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def list_items(board: Board, lane: Optional[str] = None, agent: Optional[str] = None) -> List[Item]:
    items = find_lane(board, lane).items if lane else board.all_items()
    if agent:
        items = [i for i in items if i.fields.get("agent") == agent]
    return list(items)


def summarize(board: Board) -> List[Dict]:
    """Per-lane item counts."""
    return [lane.summary() for lane in board.lanes]
