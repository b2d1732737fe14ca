"""CLI entry point for ccstat."""

import logging
import sys
from pathlib import Path

import click
import uvicorn

from .config import get_data_file_path, get_projects_path
from .core import ReportError, ReportOptions
from .export import build_json_export, count_conversations, dump_json, render_markdown, write_export
from .loader import SessionLoader
from .paths import resolve_output_path, validate_output_format
from .projects import load_projects, parse_sort_spec
from .terminal import render_report


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """Report on assistant project history and reconstructed conversations."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="[%(name)s] %(levelname)s: %(message)s",
        stream=sys.stderr,
    )


@main.command()
@click.option("--width", default=80, type=click.IntRange(min=1), help="Display width.")
@click.option("--sort-by", default="ascii", help="Sort method: ascii or size, prefixed with + or - for direction.")
@click.option(
    "--history-order",
    default="reverse",
    type=click.Choice(["reverse", "chronological"]),
    help="Show newest or oldest entries first.",
)
@click.option("--current", is_flag=True, help="Only report on the project in the current directory.")
@click.option("--full-message", is_flag=True, help="Do not truncate messages.")
@click.option("--with-ai", is_flag=True, help="Show reconstructed conversations instead of history.")
@click.option("--output", "-o", "output_path", default=None, help="Export to a file or directory.")
@click.option("--output-format", default="json", help="Export format: json or markdown.")
def stat(width, sort_by, history_order, current, full_message, with_ai, output_path, output_format):
    """Show per-project history or conversations, or export them."""
    method, ascending = parse_sort_spec(sort_by)
    options = ReportOptions(
        width=width,
        sort_method=method,
        ascending=ascending,
        history_order=history_order,
        current=current,
        full_message=full_message,
        with_ai=with_ai,
        output_path=output_path,
        output_format=output_format,
    )
    current_dir = str(Path.cwd())

    try:
        validate_output_format(options.output_format)
        projects = load_projects(
            get_data_file_path(),
            options.sort_method,
            options.ascending,
            current_dir if options.current else None,
        )
    except ReportError as e:
        raise click.ClickException(str(e)) from e

    if projects is None:
        click.secho("No projects found in data file", fg="yellow")
        return

    loader = SessionLoader(get_projects_path())

    if options.output_path:
        try:
            _export(projects, options, loader, current_dir)
        except ReportError as e:
            raise click.ClickException(str(e)) from e
        return

    for line in render_report(projects, options, loader.conversation_pairs):
        click.echo(line)


def _export(projects, options: ReportOptions, loader: SessionLoader, current_dir: str):
    path, auto_named = resolve_output_path(
        options.output_path,
        options.output_format,
        current=options.current,
        with_ai=options.with_ai,
        current_dir=current_dir,
    )
    if auto_named:
        click.secho(f"📁 Auto-generated filename: {path.name}", fg="blue")

    if options.output_format == "json":
        document = build_json_export(projects, options, loader.conversation_pairs)
        write_export(path, dump_json(document))
        click.secho(f"✅ JSON data exported to: {path}", fg="green")
        total_conversations = count_conversations(document)
    else:
        pairs_by_path = {p.path: loader.conversation_pairs(p.path) for p in projects} if options.with_ai else {}
        content = render_markdown(projects, options, lambda project_path: pairs_by_path.get(project_path, []))
        write_export(path, content)
        click.secho(f"✅ Markdown data exported to: {path}", fg="green")
        total_conversations = sum(len(pairs) for pairs in pairs_by_path.values())

    click.secho(f"📊 Exported {len(projects)} projects", fg="blue")
    if options.with_ai:
        click.secho(f"💬 Total conversations: {total_conversations}", fg="blue")


@main.command()
@click.option("--port", default=8080, help="Port to serve on.")
@click.option("--host", default="127.0.0.1", help="Host to bind to.")
def serve(port: int, host: str):
    """Start the HTTP interface."""
    click.echo(f"Starting ccstat on http://{host}:{port}")
    uvicorn.run("ccstat.server:app", host=host, port=port, reload=False)
