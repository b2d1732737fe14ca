"""Path resolution for the assistant's data file and session logs."""

import os
from pathlib import Path


def get_data_file_path() -> Path:
    """Return the path to the home data file listing known projects."""
    env = os.environ.get("CCSTAT_DATA_FILE")
    if env:
        return Path(env)

    return Path.home() / ".claude.json"


def get_projects_path() -> Path:
    """Return the directory holding per-project session log directories."""
    env = os.environ.get("CCSTAT_PROJECTS_PATH")
    if env:
        return Path(env)

    return Path.home() / ".claude" / "projects"


def encode_project_dir(project_path: str) -> str:
    """Derive a session directory name from a project path.

    /Users/alice/dev/my.app -> -Users-alice-dev-my-app
    """
    return project_path.replace("/", "-").replace("\\", "-").replace(".", "-")
