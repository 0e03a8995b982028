"""
Item serializer and document joiner.
"""
from typing import Dict, Iterable, List, Optional

from .errors import InvalidField
from .parser import line_ending
from .schema import Item

FIELD_KEY_FORBIDDEN = "[]:\r\n"
FIELD_VALUE_FORBIDDEN = "]\r\n"


def validate_fields(fields: Dict[str, str]) -> None:
    """Reject keys and values that `[key::value]` cannot carry intact."""
    for key, value in fields.items():
        if not key.strip():
            raise InvalidField(key, "empty key")
        bad = [c for c in FIELD_KEY_FORBIDDEN if c in key]
        if bad:
            raise InvalidField(key, f"key contains {bad[0]!r}")
        if not str(value).strip():
            raise InvalidField(key, "empty value")
        bad = [c for c in FIELD_VALUE_FORBIDDEN if c in str(value)]
        if bad:
            raise InvalidField(key, f"value contains {bad[0]!r}")


def render_line(
    text: str,
    checked: bool = False,
    fields: Optional[Dict[str, str]] = None,
    tags: Iterable[str] = (),
    block_id: Optional[str] = None,
    ending: str = "",
) -> str:
    """Render `- [ ] text [k::v] ... #tag ... ^id` deterministically."""
    parts = [text] if text else []
    for k, v in (fields or {}).items():
        parts.append(f"[{k}::{v}]")
    parts.extend(f"#{t}" for t in tags)
    if block_id:
        parts.append(f"^{block_id}")
    return f"- [{'x' if checked else ' '}] " + " ".join(parts) + ending


def build_item_line(
    item: Item,
    fields: Optional[Dict[str, str]] = None,
    tags: Optional[List[str]] = None,
    checked: Optional[bool] = None,
) -> str:
    """
    Rebuild an item's line with updates applied.

    Fields are merged (patch wins), tags are replaced wholesale when
    given, text and block id always carry over. So does a trailing
    `\\r`, so CRLF boards keep their line endings.
    """
    merged = {**item.fields, **(fields or {})}
    return render_line(
        item.text,
        checked=item.checked if checked is None else checked,
        fields=merged,
        tags=item.tags if tags is None else tags,
        block_id=item.block_id,
        ending=line_ending(item.raw),
    )


def join_lines(lines: List[str]) -> str:
    """Serialize a line buffer with exactly one trailing newline."""
    return "\n".join(lines) + "\n"
