"""Export project reports to JSON and Markdown documents."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

from . import __version__
from .blocks import block_to_dict
from .core import (
    ConversationPair,
    ExportWriteError,
    ProjectRecord,
    RawBlock,
    ReportOptions,
    TextBlock,
    ThinkingBlock,
    ToolUseBlock,
)
from .formatting import (
    fold_product_name,
    ordered,
    relevant_params,
    summarize_tools,
    tool_action_description,
)

logger = logging.getLogger(__name__)

PairsLoader = Callable[[str], list[ConversationPair]]

NO_RESPONSE = {"type": "no_response"}


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _iso(moment: datetime) -> str:
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


# ── JSON ─────────────────────────────────────────────────────────


def pair_to_dict(index: int, pair: ConversationPair) -> dict:
    """Convert a ConversationPair to a JSON-serializable dict."""
    if pair.response:
        response = [block_to_dict(block) for block in pair.blocks]
    else:
        response = [dict(NO_RESPONSE)]
    return {
        "index": index,
        "timestamp": pair.timestamp,
        "userPrompt": fold_product_name(pair.user_prompt),
        "claudeResponse": response,
    }


def conversations_to_list(pairs: list[ConversationPair], reverse: bool) -> list[dict]:
    return [pair_to_dict(i, pair) for i, pair in enumerate(ordered(pairs, reverse), 1)]


def project_to_dict(project: ProjectRecord, options: ReportOptions, load_pairs: Optional[PairsLoader] = None) -> dict:
    data = {
        "path": project.path,
        "totalSize": project.total_size,
        "historyItemsCount": len(project.history_items),
    }
    if options.with_ai and load_pairs is not None:
        data["conversations"] = conversations_to_list(load_pairs(project.path), options.reverse_order)
    else:
        data["historyItems"] = [
            {"index": i, "display": item.display, "size": item.size}
            for i, item in enumerate(project.history_items, 1)
        ]
    return data


def build_json_export(
    projects: list[ProjectRecord],
    options: ReportOptions,
    load_pairs: Optional[PairsLoader] = None,
    generated_at: Optional[datetime] = None,
) -> dict:
    """Build the export document. Content is never truncated."""
    return {
        "metadata": {
            "generatedAt": _iso(generated_at or _now()),
            "totalProjects": len(projects),
            "filters": {
                "current": options.current,
                "withAi": options.with_ai,
            },
        },
        "projects": [project_to_dict(p, options, load_pairs) for p in projects],
    }


def render_json(
    projects: list[ProjectRecord],
    options: ReportOptions,
    load_pairs: Optional[PairsLoader] = None,
    generated_at: Optional[datetime] = None,
) -> str:
    return dump_json(build_json_export(projects, options, load_pairs, generated_at))


def dump_json(document: dict) -> str:
    return json.dumps(document, indent=2, ensure_ascii=False, default=str)


def count_conversations(document: dict) -> int:
    return sum(len(p.get("conversations", [])) for p in document.get("projects", []))


# ── Markdown ─────────────────────────────────────────────────────


def render_markdown(
    projects: list[ProjectRecord],
    options: ReportOptions,
    load_pairs: Optional[PairsLoader] = None,
    generated_at: Optional[datetime] = None,
) -> str:
    """Export projects as a single Markdown document."""
    filters = "Current Project Only" if options.current else "All Projects"
    if options.with_ai:
        filters += ", With AI Responses"

    lines = [
        "# ccstat Export",
        "",
        f"**Generated**: {_iso(generated_at or _now())}",
        f"**Total Projects**: {len(projects)}",
        f"**Filters**: {filters}",
        "",
    ]

    for index, project in enumerate(projects, 1):
        lines.extend([
            "---",
            "",
            f"## Project {index}: `{project.path}`",
            "",
            f"- **Total Size**: {project.total_size / 1024:.2f} KB",
            f"- **History Entries**: {len(project.history_items)}",
            "",
        ])

        if options.with_ai and load_pairs is not None:
            lines.extend(["### Conversations", ""])
            pairs = ordered(load_pairs(project.path), options.reverse_order)
            for number, pair in enumerate(pairs, 1):
                lines.extend(_markdown_pair(number, pair, options))
        else:
            lines.extend(["### History", ""])
            for number, item in enumerate(ordered(project.history_items, options.reverse_order), 1):
                lines.extend([f"{number}. {item.display}", ""])

    lines.extend(["---", "", f"*Exported by ccstat v{__version__}*", ""])
    return "\n".join(lines)


def _markdown_pair(number: int, pair: ConversationPair, options: ReportOptions) -> list[str]:
    lines = [
        f"## 💬 Conversation {number}",
        "",
        f"**You:** {fold_product_name(pair.user_prompt)}",
        "",
    ]

    if not pair.response:
        lines.extend(["**AI:** *No response recorded*", "", "---", ""])
        return lines

    blocks = pair.blocks
    texts = [b.content for b in blocks if isinstance(b, TextBlock)]
    thoughts = [b.content for b in blocks if isinstance(b, ThinkingBlock)]
    tools = [b for b in blocks if isinstance(b, ToolUseBlock)]
    unparsed = [b.content for b in blocks if isinstance(b, RawBlock)]

    if thoughts:
        lines.extend(["<details>", "<summary>🤔 AI's internal thoughts...</summary>", ""])
        for thought in thoughts:
            lines.extend([f"> {thought}", ""])
        lines.extend(["</details>", ""])

    if options.full_message:
        lines.extend(["**AI Response (Full):**", ""])
        if texts:
            lines.append("**Text Responses:**")
            lines.extend(f"{i}. {text}" for i, text in enumerate(texts, 1))
            lines.append("")
        if thoughts:
            lines.append("**AI Thinking:**")
            lines.extend(f"{i}. {thought}" for i, thought in enumerate(thoughts, 1))
            lines.append("")
        lines.append("**All Response Parts:**")
        lines.append("```json")
        lines.extend(pair.segments)
        lines.extend(["```", ""])
    else:
        if texts:
            lines.extend([f"**AI:** {' '.join(texts).strip()}", ""])
        else:
            lines.extend(["**AI:** *Worked with tools to complete the task*", ""])
        if unparsed:
            lines.extend(["**Unparsed output:**", "```"])
            lines.extend(unparsed)
            lines.extend(["```", ""])

    if tools:
        lines.append("**Actions taken:**")
        for tool_name, count in summarize_tools([t.tool for t in tools]):
            lines.append(f"- {tool_action_description(tool_name, count)}")
        lines.append("")

        lines.extend(["<details>", "<summary>🔧 Technical details</summary>", ""])
        for i, tool in enumerate(tools, 1):
            lines.append(f"{i}. **{tool.tool}**")
            for param in relevant_params(tool.tool, tool.input):
                lines.append(f"   - {param}")
            lines.append("")
        lines.extend(["</details>", ""])

    lines.extend(["---", ""])
    return lines


# ── Writing ──────────────────────────────────────────────────────


def write_export(path: Path, content: str) -> Path:
    """Write an export document, raising ExportWriteError on failure."""
    path = Path(path)
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ExportWriteError(f"Failed to write {path}: {e}") from e
    logger.debug("Wrote %d characters to %s", len(content), path)
    return path
