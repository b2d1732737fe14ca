"""Encode content blocks as self-describing JSON records and decode them back.

A pair's response is stored as one compact JSON object per block, joined by
a blank line. JSON escapes newlines inside strings, so the separator never
occurs within a record and the joined text can be split back reliably.
Decoding never raises: a segment that does not parse becomes a ``RawBlock``.
"""

import json
import logging

from .core import (
    ContentBlock,
    RawBlock,
    SummaryBlock,
    SystemBlock,
    TextBlock,
    ThinkingBlock,
    ToolUseBlock,
)

logger = logging.getLogger(__name__)

SEGMENT_SEPARATOR = "\n\n"


def block_to_dict(block: ContentBlock) -> dict:
    """Return the tagged record for a block."""
    if isinstance(block, TextBlock):
        return {"type": "text", "content": block.content}
    if isinstance(block, ToolUseBlock):
        return {"type": "tool_use", "tool": block.tool, "input": block.input}
    if isinstance(block, ThinkingBlock):
        return {"type": "thinking", "content": block.content}
    if isinstance(block, SystemBlock):
        return {"type": "system", "content": block.content, "isMeta": block.is_meta, "level": block.level}
    if isinstance(block, SummaryBlock):
        return {"type": "summary", "summary": block.summary}
    if isinstance(block, RawBlock):
        return {"type": "raw", "content": block.content}
    raise TypeError(f"Unknown content block: {block!r}")


def block_from_dict(data: dict, original: str = "") -> ContentBlock:
    """Build a block from its tagged record, or a RawBlock for unknown tags."""
    block_type = data.get("type")

    if block_type == "text":
        return TextBlock(content=_as_text(data.get("content")))
    if block_type == "tool_use":
        return ToolUseBlock(tool=str(data.get("tool") or "unknown"), input=data.get("input"))
    if block_type == "thinking":
        return ThinkingBlock(content=_as_text(data.get("content")))
    if block_type == "system":
        return SystemBlock(
            content=data.get("content"),
            is_meta=bool(data.get("isMeta", data.get("meta", False))),
            level=data.get("level") or "info",
        )
    if block_type == "summary":
        return SummaryBlock(summary=data.get("summary"))
    if block_type == "raw":
        return RawBlock(content=_as_text(data.get("content")))

    return RawBlock(content=original or json.dumps(data, ensure_ascii=False))


def encode_block(block: ContentBlock) -> str:
    """Serialize one block to a single-line JSON record."""
    return json.dumps(block_to_dict(block), ensure_ascii=False, default=str)


def encode_blocks(blocks: list[ContentBlock]) -> str:
    return SEGMENT_SEPARATOR.join(encode_block(b) for b in blocks)


def split_segments(text: str) -> list[str]:
    """Split encoded response text into trimmed, non-empty segments."""
    return [part.strip() for part in text.split(SEGMENT_SEPARATOR) if part.strip()]


def decode_segment(segment: str) -> ContentBlock:
    segment = segment.strip()
    try:
        data = json.loads(segment)
    except (json.JSONDecodeError, TypeError) as e:
        logger.debug("Undecodable response segment (%s): %.60s", e, segment)
        return RawBlock(content=segment)

    if not isinstance(data, dict):
        return RawBlock(content=segment)
    return block_from_dict(data, original=segment)


def decode_blocks(text: str) -> list[ContentBlock]:
    """Decode encoded response text back into blocks, in order."""
    return [decode_segment(segment) for segment in split_segments(text)]


def _as_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)
