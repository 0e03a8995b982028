"""
Board document schema.

A board is a Markdown file split into lanes by `## <title>` headers.
Each lane holds checkbox items:

  - [ ] Task title [agent::claude-1] [status::in-progress] #agent-task #in-progress ^abc123

The model is rebuilt from text on every read; nothing here is persisted.
"""
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any


class AnnotationKind(Enum):
    """Structured annotations embedded in an item line."""
    FIELD = "field"          # [key::value]
    TAG = "tag"              # #label
    BLOCK_ID = "block_id"    # ^token at end of line


class TaskStatus(Enum):
    """Status values with a matching status tag."""
    IN_PROGRESS = "in-progress"
    BLOCKED = "blocked"
    COMPLETE = "complete"    # lane is named "Done", tag stays "complete"
    FAILED = "failed"

    @classmethod
    def tags(cls) -> List[str]:
        return [s.value for s in cls]


@dataclass
class Annotation:
    """One token found by the annotation tokenizer."""
    kind: AnnotationKind
    key: str = ""
    value: str = ""


@dataclass
class Item:
    """A single checkbox line inside a lane."""

    line_index: int
    raw: str
    checked: bool
    text: str
    block_id: Optional[str] = None
    fields: Dict[str, str] = field(default_factory=dict)
    tags: List[str] = field(default_factory=list)
    lane_title: str = ""

    @property
    def agent(self) -> Optional[str]:
        return self.fields.get("agent") or None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "id": self.block_id,
            "text": self.text,
            "lane": self.lane_title,
            "checked": self.checked,
            "fields": dict(self.fields),
            "tags": list(self.tags),
        }


@dataclass
class Lane:
    """Half-open line range [start_line, end_line) opened by a header line."""

    title: str
    start_line: int
    end_line: int
    items: List[Item] = field(default_factory=list)

    def matches(self, title: str) -> bool:
        return self.title.lower() == title.strip().lower()

    @property
    def unclaimed(self) -> int:
        return sum(1 for i in self.items if not i.agent)

    def summary(self) -> Dict[str, Any]:
        return {"title": self.title, "total": len(self.items), "unclaimed": self.unclaimed}


@dataclass
class Board:
    """Parsed document: lanes plus the full line buffer."""

    lanes: List[Lane] = field(default_factory=list)
    lines: List[str] = field(default_factory=list)

    def all_items(self) -> List[Item]:
        return [item for lane in self.lanes for item in lane.items]

    def block_ids(self) -> List[str]:
        return [i.block_id for i in self.all_items() if i.block_id]
