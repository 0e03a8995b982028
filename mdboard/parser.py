"""
Board parsing: line tokenizer, annotation tokenizer, item parser, board builder.

Everything in this module is pure: text in, model out.
"""
import logging
import re
from typing import List, Optional

from .schema import Annotation, AnnotationKind, Board, Item, Lane

logger = logging.getLogger(__name__)

LANE_HEADER_RE = re.compile(r"^## (.+)")
ITEM_RE = re.compile(r"^- \[([ x])\] (.+)$")
# Anything that looks like a checkbox counts when locating the end of a lane
ITEM_PREFIX_RE = re.compile(r"^- \[")

FIELD_RE = re.compile(r"\[([^\]:]+)::([^\]]+)\]")
BLOCK_ID_RE = re.compile(r"(?:^|\s+)\^([A-Za-z0-9-]+)\s*$")
TAG_RE = re.compile(r"#([\w-]+)", re.ASCII)
MULTISPACE_RE = re.compile(r"\s{2,}")


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Line tokenizer
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def split_lines(text: str) -> List[str]:
    """Split document text, dropping exactly one trailing newline."""
    if text.endswith("\n"):
        text = text[:-1]
    return text.split("\n")


def lane_title(line: str) -> Optional[str]:
    """Return the trimmed title if the line is a lane header."""
    m = LANE_HEADER_RE.match(line)
    return m.group(1).strip() if m else None


def is_item_line(line: str) -> bool:
    return bool(ITEM_PREFIX_RE.match(line))


def line_ending(line: str) -> str:
    """The `\\r` a CRLF document leaves on each split line, or ""."""
    return "\r" if line.endswith("\r") else ""


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Annotation tokenizer
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def strip_fields(content: str) -> str:
    return FIELD_RE.sub("", content)


def strip_block_id(content: str) -> str:
    return BLOCK_ID_RE.sub("", content)


def strip_tags(content: str) -> str:
    return TAG_RE.sub("", content)


def tokenize_annotations(content: str) -> List[Annotation]:
    """
    Scan item content into a typed annotation list.

    Fields come first and are removed before tags are scanned, so a
    `#` inside `[key::value]` never turns into a tag. The block id is
    only recognised as the last run of the content.
    """
    annotations: List[Annotation] = []

    for m in FIELD_RE.finditer(content):
        annotations.append(Annotation(AnnotationKind.FIELD, m.group(1).strip(), m.group(2).strip()))

    for m in TAG_RE.finditer(strip_fields(content)):
        annotations.append(Annotation(AnnotationKind.TAG, m.group(1)))

    m = BLOCK_ID_RE.search(content)
    if m:
        annotations.append(Annotation(AnnotationKind.BLOCK_ID, value=m.group(1)))

    return annotations


def clean_text(content: str) -> str:
    """Display text: content minus fields, trailing block id and tags."""
    text = strip_tags(strip_block_id(strip_fields(content)))
    return MULTISPACE_RE.sub(" ", text).strip()


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Item parser
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def parse_item(line: str, line_index: int, lane: str) -> Optional[Item]:
    """Parse one checkbox line. Returns None for anything else."""
    m = ITEM_RE.match(line)
    if not m:
        return None

    content = m.group(2)
    fields = {}
    tags: List[str] = []
    block_id = None

    for ann in tokenize_annotations(content):
        if ann.kind == AnnotationKind.FIELD:
            fields[ann.key] = ann.value  # later keys win
        elif ann.kind == AnnotationKind.TAG:
            if ann.key not in tags:
                tags.append(ann.key)
        elif ann.kind == AnnotationKind.BLOCK_ID:
            block_id = ann.value

    return Item(
        line_index=line_index,
        raw=line,
        checked=m.group(1) == "x",
        text=clean_text(content),
        block_id=block_id,
        fields=fields,
        tags=tags,
        lane_title=lane,
    )


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Board builder
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def read_board(text: str) -> Board:
    """Build lanes and items from whole-document text."""
    lines = split_lines(text)
    lanes: List[Lane] = []
    current: Optional[Lane] = None

    for i, line in enumerate(lines):
        title = lane_title(line)
        if title is not None:
            if current:
                current.end_line = i
            current = Lane(title=title, start_line=i, end_line=len(lines))
            lanes.append(current)
            continue

        if current:
            item = parse_item(line, i, current.title)
            if item:
                current.items.append(item)

    logger.debug(
        f"Parsed {len(lines)} lines into {len(lanes)} lanes, "
        f"{sum(len(l.items) for l in lanes)} items"
    )
    return Board(lanes=lanes, lines=lines)
