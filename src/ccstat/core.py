"""Core data models for ccstat."""

from dataclasses import dataclass, field
from typing import Any, Optional, Union


class ReportError(Exception):
    """Base class for errors that abort a report run."""


class DataFileError(ReportError):
    """The home data file is missing or cannot be parsed."""


class OutputFormatError(ReportError):
    """An export format other than json or markdown was requested."""


class ExportWriteError(ReportError):
    """The export target could not be written."""


EVENT_KINDS = ("user", "assistant", "system", "summary")


@dataclass(frozen=True)
class RawEvent:
    """One parsed line from a session log."""

    kind: str  # "user" | "assistant" | "system" | "summary" | "other"
    role: Optional[str] = None
    content: Any = None  # str or list of content items
    timestamp: str = ""
    id: str = ""
    data: dict = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_entry(cls, entry: dict) -> "RawEvent":
        entry_type = entry.get("type", "")
        kind = entry_type if entry_type in EVENT_KINDS else "other"

        message = entry.get("message")
        role = None
        content = None
        if isinstance(message, dict):
            role = message.get("role")
            content = message.get("content")

        return cls(
            kind=kind,
            role=role,
            content=content,
            timestamp=entry.get("timestamp") or "",
            id=entry.get("uuid") or "",
            data=entry,
        )


# ── Content blocks ───────────────────────────────────────────────


@dataclass(frozen=True)
class TextBlock:
    content: str
    type: str = field(default="text", init=False)


@dataclass(frozen=True)
class ToolUseBlock:
    tool: str
    input: Any = None
    type: str = field(default="tool_use", init=False)


@dataclass(frozen=True)
class ThinkingBlock:
    content: str
    type: str = field(default="thinking", init=False)


@dataclass(frozen=True)
class SystemBlock:
    content: Any = None
    is_meta: bool = False
    level: str = "info"
    type: str = field(default="system", init=False)


@dataclass(frozen=True)
class SummaryBlock:
    summary: Any = None
    type: str = field(default="summary", init=False)


@dataclass(frozen=True)
class RawBlock:
    """A response segment that could not be decoded."""

    content: str
    type: str = field(default="raw", init=False)


ContentBlock = Union[TextBlock, ToolUseBlock, ThinkingBlock, SystemBlock, SummaryBlock, RawBlock]


@dataclass
class ConversationPair:
    """One reconstructed turn: a user prompt and the activity that followed it.

    ``response`` holds the encoded blocks (see ``ccstat.blocks``) or None when
    no assistant activity was recorded for the prompt.
    """

    user_prompt: str
    response: Optional[str] = None
    timestamp: str = ""

    @property
    def segments(self) -> list[str]:
        from .blocks import split_segments
        return split_segments(self.response) if self.response else []

    @property
    def blocks(self) -> list[ContentBlock]:
        from .blocks import decode_blocks
        return decode_blocks(self.response) if self.response else []


@dataclass
class HistoryItem:
    """An entry from the coarse per-project history list."""

    display: str
    size: int


@dataclass
class ProjectRecord:
    """A project entry from the home data file."""

    path: str
    total_size: int
    history_items: list[HistoryItem] = field(default_factory=list)


@dataclass
class ReportOptions:
    """Settings shared by the terminal, JSON and Markdown renderers."""

    width: int = 80
    sort_method: str = "ascii"  # "ascii" | "size"
    ascending: bool = True
    history_order: str = "reverse"  # "reverse" | "chronological"
    current: bool = False
    full_message: bool = False
    with_ai: bool = False
    output_path: Optional[str] = None
    output_format: str = "json"

    @property
    def reverse_order(self) -> bool:
        return self.history_order == "reverse"
