"""Resolve where an export is written."""

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .core import ExportWriteError, OutputFormatError

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = {"json": "json", "markdown": "md"}


def validate_output_format(output_format: str) -> str:
    """Return the format if supported, otherwise raise OutputFormatError."""
    if output_format not in OUTPUT_FORMATS:
        supported = ", ".join(OUTPUT_FORMATS)
        raise OutputFormatError(f"Invalid output format: {output_format}. Supported formats: {supported}")
    return output_format


def looks_like_directory(target: str) -> bool:
    """True for an existing directory, or a missing path ending in a separator."""
    path = Path(target)
    if path.exists():
        return path.is_dir()
    return target.endswith("/") or target.endswith(os.sep)


def export_filename(
    output_format: str,
    current: bool,
    with_ai: bool,
    current_dir: Optional[str] = None,
    now: Optional[datetime] = None,
) -> str:
    """Build a filename encoding scope, content mode and time.

    e.g. ccstat-export-myapp-conversations-2025-01-20-100030.json
    """
    now = now or datetime.now(timezone.utc)
    scope = "all-projects"
    if current and current_dir:
        scope = Path(current_dir).name or "root"
    mode = "conversations" if with_ai else "history"
    stamp = now.strftime("%Y-%m-%d-%H%M%S")
    return f"ccstat-export-{scope}-{mode}-{stamp}.{OUTPUT_FORMATS[output_format]}"


def resolve_output_path(
    target: str,
    output_format: str,
    current: bool = False,
    with_ai: bool = False,
    current_dir: Optional[str] = None,
    now: Optional[datetime] = None,
) -> tuple[Path, bool]:
    """Return (path, auto_named) for an export target.

    A directory target gets a generated filename and is created if needed;
    anything else is used as the file path as given.
    """
    validate_output_format(output_format)

    if not looks_like_directory(target):
        return Path(target), False

    directory = Path(target)
    if not directory.exists():
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ExportWriteError(f"Failed to create directory {directory}: {e}") from e
        logger.debug("Created export directory %s", directory)

    filename = export_filename(output_format, current, with_ai, current_dir, now)
    return directory / filename, True
