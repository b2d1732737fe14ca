"""Load the home data file and build sorted project records."""

import json
import logging
from pathlib import Path
from typing import Optional

from .core import DataFileError, HistoryItem, ProjectRecord

logger = logging.getLogger(__name__)

SORT_METHODS = ("ascii", "size")


def load_data_file(path: Path) -> dict:
    """Read and parse the home data file.

    Raises DataFileError if the file is missing or is not valid JSON.
    """
    path = Path(path)
    if not path.is_file():
        raise DataFileError(f"No data file found at {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DataFileError(f"Failed to parse data file {path}: {e}") from e
    except OSError as e:
        raise DataFileError(f"Failed to read data file {path}: {e}") from e

    if not isinstance(data, dict):
        raise DataFileError(f"Unexpected data file layout in {path}")
    return data


def parse_sort_spec(spec: str) -> tuple[str, bool]:
    """Parse a sort specification like ``size``, ``+ascii`` or ``-size``.

    Returns (method, ascending). Unknown methods fall back to ``ascii``.
    """
    spec = (spec or "").strip()
    ascending = True
    if spec.startswith("+"):
        spec = spec[1:]
    elif spec.startswith("-"):
        spec = spec[1:]
        ascending = False

    method = spec if spec in SORT_METHODS else "ascii"
    return method, ascending


def serialized_size(value) -> int:
    """Length of the compact JSON form of a value."""
    return len(json.dumps(value, ensure_ascii=False, separators=(",", ":")))


def build_project_record(path: str, project_data) -> ProjectRecord:
    history = []
    if isinstance(project_data, dict):
        history = project_data.get("history") or []

    items = []
    for item in history:
        if not isinstance(item, dict):
            continue
        display = item.get("display")
        items.append(HistoryItem(
            display=display if isinstance(display, str) else "",
            size=serialized_size(item),
        ))

    return ProjectRecord(
        path=path,
        total_size=serialized_size(project_data),
        history_items=items,
    )


def sort_projects(projects: list[ProjectRecord], method: str = "ascii", ascending: bool = True) -> list[ProjectRecord]:
    if method == "size":
        return sorted(projects, key=lambda p: p.total_size, reverse=not ascending)
    return sorted(projects, key=lambda p: p.path, reverse=not ascending)


def aggregate_projects(
    projects_map: dict,
    method: str = "ascii",
    ascending: bool = True,
    current_dir: Optional[str] = None,
) -> list[ProjectRecord]:
    """Build sorted project records from the data file's project mapping.

    When ``current_dir`` is given only the project with exactly that path
    is kept.
    """
    entries = projects_map.items()
    if current_dir is not None:
        entries = [(path, data) for path, data in entries if path == current_dir]

    records = [build_project_record(path, data) for path, data in entries]
    return sort_projects(records, method, ascending)


def load_projects(
    data_file: Path,
    method: str = "ascii",
    ascending: bool = True,
    current_dir: Optional[str] = None,
) -> Optional[list[ProjectRecord]]:
    """Load the data file and aggregate its projects.

    Returns None when the file has no project mapping.
    """
    data = load_data_file(data_file)
    projects_map = data.get("projects")
    if not isinstance(projects_map, dict):
        logger.info("No projects mapping in %s", data_file)
        return None
    return aggregate_projects(projects_map, method, ascending, current_dir)
