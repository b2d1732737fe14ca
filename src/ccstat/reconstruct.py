"""Regroup a merged event timeline into conversation pairs.

The reconstruction is a fold of ``step`` over the events, carrying a
``ReconstructionState``:

- a user event with extractable text closes the open pair if it has any
  response blocks, then opens a new pair with its text. An open pair with
  no blocks yet is overwritten, so back-to-back prompts collapse into the
  latest one.
- an assistant event starts collecting and appends text, tool_use and
  thinking blocks.
- system and summary events are appended only once collecting has started.
- anything else is ignored.

At the end the open pair, if any, is emitted even without a response.
"""

from dataclasses import dataclass, replace
from functools import reduce
from typing import Optional

from .blocks import encode_blocks
from .core import (
    ContentBlock,
    ConversationPair,
    RawEvent,
    SummaryBlock,
    SystemBlock,
    TextBlock,
    ThinkingBlock,
    ToolUseBlock,
)


@dataclass(frozen=True)
class ReconstructionState:
    prompt: Optional[str] = None
    prompt_timestamp: Optional[str] = None
    blocks: tuple = ()
    collecting: bool = False
    pairs: tuple = ()
    last_timestamp: str = ""


def extract_prompt_text(event: RawEvent) -> Optional[str]:
    """Return the prompt text of a user event, or None if it carries none.

    A string body is used as is; for a list body the first ``text`` item is
    used. Tool results and other non-text items are not prompts.
    """
    if event.kind != "user" or event.role != "user":
        return None

    content = event.content
    if isinstance(content, str):
        return content or None
    if isinstance(content, list):
        for item in content:
            if isinstance(item, dict) and item.get("type") == "text":
                return item.get("text") or None
    return None


def assistant_blocks(event: RawEvent) -> list[ContentBlock]:
    """Convert the content of an assistant event into content blocks."""
    content = event.content
    if isinstance(content, str):
        return [TextBlock(content=content)]
    if not isinstance(content, list):
        return []

    blocks = []
    for item in content:
        if not isinstance(item, dict):
            continue
        item_type = item.get("type")
        if item_type == "text" and item.get("text"):
            blocks.append(TextBlock(content=item["text"]))
        elif item_type == "tool_use":
            blocks.append(ToolUseBlock(tool=item.get("name") or "unknown", input=item.get("input")))
        elif item_type == "thinking" and item.get("thinking"):
            blocks.append(ThinkingBlock(content=item["thinking"]))
    return blocks


def _flush(state: ReconstructionState, fallback_timestamp: str) -> tuple:
    pair = ConversationPair(
        user_prompt=state.prompt,
        response=encode_blocks(list(state.blocks)) if state.blocks else None,
        timestamp=state.prompt_timestamp or fallback_timestamp,
    )
    return state.pairs + (pair,)


def step(state: ReconstructionState, event: RawEvent) -> ReconstructionState:
    """Advance the reconstruction by one event."""
    if event.timestamp:
        state = replace(state, last_timestamp=event.timestamp)

    if event.kind == "user":
        text = extract_prompt_text(event)
        if text is None:
            return state
        if state.prompt and state.blocks:
            state = replace(
                state,
                pairs=_flush(state, event.timestamp),
                blocks=(),
                collecting=False,
            )
        return replace(state, prompt=text, prompt_timestamp=event.timestamp or None)

    if event.kind == "assistant":
        if event.role not in (None, "assistant"):
            return state
        return replace(
            state,
            collecting=True,
            blocks=state.blocks + tuple(assistant_blocks(event)),
        )

    if event.kind == "system" and state.collecting:
        data = event.data
        block = SystemBlock(
            content=data.get("content"),
            is_meta=bool(data.get("isMeta", False)),
            level=data.get("level") or "info",
        )
        return replace(state, blocks=state.blocks + (block,))

    if event.kind == "summary" and state.collecting:
        return replace(state, blocks=state.blocks + (SummaryBlock(summary=event.data.get("summary")),))

    return state


def finish(state: ReconstructionState) -> list[ConversationPair]:
    """Emit the trailing open pair and return all pairs in order."""
    if state.prompt:
        return list(_flush(state, state.last_timestamp))
    return list(state.pairs)


def reconstruct_pairs(events: list[RawEvent]) -> list[ConversationPair]:
    """Reconstruct conversation pairs from chronologically ordered events."""
    return finish(reduce(step, events, ReconstructionState()))
