"""Session log discovery, parsing and timeline merging.

Each project has a directory under the projects root whose name is the
project path with separators and dots replaced by ``-``. Every ``.jsonl``
file inside it is one session log: one JSON object per line.

Missing directories, unreadable files and malformed lines are not errors;
they simply contribute no events.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from .config import encode_project_dir
from .core import ConversationPair, RawEvent
from .reconstruct import reconstruct_pairs

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class SessionLoader:
    """Read session logs for projects under a given projects directory."""

    def __init__(self, projects_dir: Path):
        self.projects_dir = Path(projects_dir)

    def session_dir(self, project_path: str) -> Path:
        return self.projects_dir / encode_project_dir(project_path)

    def find_session_files(self, project_path: str) -> list[Path]:
        """Return the session log files for a project, or [] if there are none."""
        session_dir = self.session_dir(project_path)
        if not session_dir.is_dir():
            return []

        try:
            return sorted(p for p in session_dir.iterdir() if p.name.endswith(".jsonl"))
        except OSError as e:
            logger.warning("Failed to list session directory %s: %s", session_dir, e)
            return []

    def load_timeline(self, project_path: str) -> list[RawEvent]:
        """Load every session for a project and merge them chronologically."""
        event_lists = [read_session_events(path) for path in self.find_session_files(project_path)]
        events = merge_timeline(event_lists)
        logger.debug("Loaded %d events for %s", len(events), project_path)
        return events

    def conversation_pairs(self, project_path: str) -> list[ConversationPair]:
        """Reconstruct the conversation pairs recorded for a project."""
        return reconstruct_pairs(self.load_timeline(project_path))


def parse_lines(lines) -> list[RawEvent]:
    """Parse JSON lines into events, skipping blank and malformed lines."""
    events = []
    for line_num, line in enumerate(lines, 1):
        line = line.strip()
        if not line:
            continue
        try:
            entry = json.loads(line)
        except json.JSONDecodeError as e:
            logger.debug("Bad JSON at line %d: %s", line_num, e)
            continue
        if not isinstance(entry, dict):
            logger.debug("Skipping non-object record at line %d", line_num)
            continue
        events.append(RawEvent.from_entry(entry))
    return events


def read_session_events(path: Path) -> list[RawEvent]:
    """Parse one session log file. An unreadable file yields no events."""
    try:
        with Path(path).open(encoding="utf-8") as f:
            return parse_lines(f)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read session log %s: %s", path, e)
        return []


def merge_timeline(event_lists: list[list[RawEvent]]) -> list[RawEvent]:
    """Concatenate event lists and sort them by timestamp.

    Events whose timestamp cannot be parsed sort as the Unix epoch.
    """
    merged = [event for events in event_lists for event in events]
    merged.sort(key=lambda event: event_time(event.timestamp))
    return merged


def event_time(value: str | None) -> datetime:
    """Parse an ISO 8601 timestamp, falling back to the epoch."""
    parsed = _parse_iso(value)
    if parsed is None:
        return _EPOCH
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_iso(value: str | None) -> datetime | None:
    """Parse an ISO 8601 datetime string."""
    if not value or not isinstance(value, str):
        return None
    try:
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        return datetime.fromisoformat(value)
    except (ValueError, TypeError):
        return None
