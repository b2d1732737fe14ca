"""Terminal report: one block per project, numbered entries, styled with click."""

import json
from typing import Callable, Optional

import click

from .core import ConversationPair, ProjectRecord, ReportOptions
from .formatting import (
    ELLIPSIS,
    HISTORY_CHROME,
    PROMPT_CHROME,
    RESPONSE_CHROME,
    RESPONSE_CLIP,
    clip,
    flatten,
    fold_product_name,
    format_size,
    ordered,
)

PairsLoader = Callable[[str], list[ConversationPair]]

NO_RESPONSE = json.dumps({"type": "no_response"}, separators=(",", ":"))


def render_report(
    projects: list[ProjectRecord],
    options: ReportOptions,
    load_pairs: Optional[PairsLoader] = None,
) -> list[str]:
    """Render every project as a list of (styled) output lines."""
    lines = []
    for index, project in enumerate(projects, 1):
        lines.extend(render_project(index, project, options, load_pairs))
    return lines


def render_project(
    index: int,
    project: ProjectRecord,
    options: ReportOptions,
    load_pairs: Optional[PairsLoader] = None,
) -> list[str]:
    lines = [
        "─" * options.width,
        click.style(f"Project {index:02d}: {project.path}", fg="cyan", bold=True),
        f"  TOTAL SIZE: {click.style(format_size(project.total_size), bold=True)}",
        f"  History Details ({click.style(str(len(project.history_items)), bold=True)} entries):",
        "",
    ]

    if options.with_ai and load_pairs is not None:
        pairs = ordered(load_pairs(project.path), options.reverse_order)
        for number, pair in enumerate(pairs, 1):
            lines.extend(render_pair(number, pair, options))
    else:
        items = ordered(project.history_items, options.reverse_order)
        for number, item in enumerate(items, 1):
            content = flatten(item.display)
            if not options.full_message:
                content = _dim_ellipsis(clip(content, options.width, HISTORY_CHROME))
            lines.append(f"  {number:02d}. {content}")

    lines.append("")
    return lines


def render_pair(number: int, pair: ConversationPair, options: ReportOptions) -> list[str]:
    prompt = flatten(fold_product_name(pair.user_prompt))
    suffix = ""
    if not options.full_message:
        prompt = clip(prompt, options.width, PROMPT_CHROME)
        if prompt.endswith(ELLIPSIS):
            prompt = prompt[: -len(ELLIPSIS)]
            suffix = click.style(ELLIPSIS, dim=True)

    lines = [click.style(f"  {number:02d}. 👤 User: {prompt}", fg="blue") + suffix]

    if pair.response:
        lines.append(click.style("      🤖 AI:", fg="green"))
        for segment in pair.segments:
            lines.append(click.style(f"        {_response_line(segment, options)}", fg="bright_black"))
    else:
        lines.append(click.style(f"      🤖 AI: {NO_RESPONSE}", fg="bright_black"))

    lines.append("")
    return lines


def _response_line(segment: str, options: ReportOptions) -> str:
    if options.full_message or len(segment) <= options.width - RESPONSE_CHROME:
        return segment
    return segment[:max(options.width - RESPONSE_CLIP, 0)] + ELLIPSIS


def _dim_ellipsis(text: str) -> str:
    if text.endswith(ELLIPSIS):
        return text[: -len(ELLIPSIS)] + click.style(ELLIPSIS, dim=True)
    return text
