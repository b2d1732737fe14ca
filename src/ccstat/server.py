"""FastAPI web server for ccstat."""

import logging
from pathlib import Path
from typing import Literal

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import Response

from . import __version__
from .config import get_data_file_path, get_projects_path
from .core import DataFileError, OutputFormatError, ProjectRecord, ReportOptions
from .export import build_json_export, conversations_to_list, dump_json, render_markdown
from .loader import SessionLoader
from .paths import export_filename, validate_output_format
from .projects import load_projects, parse_sort_spec

logger = logging.getLogger(__name__)

app = FastAPI(title="ccstat", version=__version__)


def _load(sort: str = "ascii", current: bool = False) -> list[ProjectRecord]:
    """Load project records, mapping data file problems to HTTP errors."""
    method, ascending = parse_sort_spec(sort)
    current_dir = str(Path.cwd()) if current else None
    try:
        projects = load_projects(get_data_file_path(), method, ascending, current_dir)
    except DataFileError as e:
        logger.error("Failed to load data file: %s", e)
        raise HTTPException(status_code=404, detail=str(e))
    return projects or []


def _find_project(path: str) -> ProjectRecord:
    for project in _load():
        if project.path == path:
            return project
    raise HTTPException(status_code=404, detail=f"Project not found: {path}")


def _project_summary(project: ProjectRecord) -> dict:
    return {
        "path": project.path,
        "totalSize": project.total_size,
        "historyItemsCount": len(project.history_items),
    }


# ── Routes ───────────────────────────────────────────────────────


@app.get("/api/projects")
async def get_projects(
    sort: str = Query("ascii", description="Sort: ascii or size, optionally prefixed with + or -"),
    current: bool = Query(False, description="Only the project in the server's working directory"),
):
    """Return the known projects with their size metrics."""
    return [_project_summary(p) for p in _load(sort, current)]


@app.get("/api/projects/history")
async def get_history(
    path: str = Query(..., description="Project path"),
    order: Literal["reverse", "chronological"] = Query("reverse", description="reverse or chronological"),
):
    """Return a project's history items."""
    project = _find_project(path)
    items = project.history_items
    if order == "reverse":
        items = list(reversed(items))
    return {
        "path": project.path,
        "historyItems": [
            {"index": i, "display": item.display, "size": item.size}
            for i, item in enumerate(items, 1)
        ],
    }


@app.get("/api/conversations")
async def get_conversations(
    path: str = Query(..., description="Project path"),
    order: Literal["reverse", "chronological"] = Query("reverse", description="reverse or chronological"),
):
    """Return the reconstructed conversations for a project."""
    pairs = SessionLoader(get_projects_path()).conversation_pairs(path)
    return {
        "path": path,
        "conversations": conversations_to_list(pairs, reverse=order == "reverse"),
    }


@app.get("/api/export")
async def export_report(
    format: str = Query("json", description="Export format: json or markdown"),
    with_ai: bool = Query(False, description="Export conversations instead of history"),
    order: Literal["reverse", "chronological"] = Query("reverse", description="reverse or chronological"),
    full: bool = Query(False, description="Full-message Markdown"),
    sort: str = Query("ascii"),
    current: bool = Query(False),
):
    """Export every project as a JSON or Markdown document."""
    try:
        validate_output_format(format)
    except OutputFormatError as e:
        raise HTTPException(status_code=400, detail=str(e))

    method, ascending = parse_sort_spec(sort)
    options = ReportOptions(
        sort_method=method,
        ascending=ascending,
        history_order=order,
        current=current,
        full_message=full,
        with_ai=with_ai,
        output_format=format,
    )
    projects = _load(sort, current)
    loader = SessionLoader(get_projects_path())
    filename = export_filename(format, current, with_ai, str(Path.cwd()))
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}

    if format == "json":
        document = build_json_export(projects, options, loader.conversation_pairs)
        return Response(
            content=dump_json(document),
            media_type="application/json",
            headers=headers,
        )

    return Response(
        content=render_markdown(projects, options, loader.conversation_pairs),
        media_type="text/markdown",
        headers=headers,
    )
