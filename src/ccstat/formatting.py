"""Formatting helpers shared by the terminal, JSON and Markdown renderers."""

import re

PRODUCT_ALIAS = "cc"

_PRODUCT_NAME_RE = re.compile(r"claude code", re.IGNORECASE)
_ALIAS_QUALIFIER_RE = re.compile(r"cc\([^)]*\)", re.IGNORECASE)

# Characters reserved for the line prefix when truncating in the terminal.
PROMPT_CHROME = 10
RESPONSE_CHROME = 12
RESPONSE_CLIP = 15
HISTORY_CHROME = 6

ELLIPSIS = "..."

_TOOL_PHRASES = {
    "Read": ("Read 1 file", "Read {n} files"),
    "Edit": ("Made 1 code edit", "Made {n} code edits"),
    "Write": ("Created 1 new file", "Created {n} new files"),
    "Bash": ("Ran 1 command", "Ran {n} commands"),
    "Grep": ("Searched 1 pattern", "Searched {n} patterns"),
    "Glob": ("Found files matching 1 pattern", "Found files matching {n} patterns"),
    "LS": ("Listed 1 directory", "Listed {n} directories"),
    "TodoWrite": ("Updated task list", "Updated task list {n} times"),
    "Task": ("Delegated 1 subtask", "Delegated {n} subtasks"),
}

COMMAND_PREVIEW_LENGTH = 50


def fold_product_name(prompt: str) -> str:
    """Shorten the product name in a prompt to its alias.

    "Ask Claude Code (beta)" stays readable as "Ask cc (beta)"; a qualifier
    glued to the alias, as in "cc(beta)", is dropped.
    """
    prompt = _PRODUCT_NAME_RE.sub(PRODUCT_ALIAS, prompt)
    return _ALIAS_QUALIFIER_RE.sub(PRODUCT_ALIAS, prompt)


def flatten(text: str) -> str:
    return text.replace("\n", " ")


def clip(text: str, width: int, chrome: int) -> str:
    """Clip text to ``width - chrome`` characters, marking the cut with an ellipsis."""
    limit = width - chrome if width > chrome else width
    if len(text) <= limit:
        return text
    return text[:limit] + ELLIPSIS


def ordered(items: list, reverse: bool) -> list:
    return list(reversed(items)) if reverse else list(items)


def format_size(size: int) -> str:
    if size > 1024 * 1024:
        return f"{size / (1024 * 1024):.2f} MB"
    if size > 1024:
        return f"{size / 1024:.2f} KB"
    return f"{size} bytes"


def tool_action_description(tool_name: str, count: int) -> str:
    """Describe ``count`` calls of a tool in plain words."""
    phrases = _TOOL_PHRASES.get(tool_name)
    if phrases:
        singular, plural = phrases
        return singular if count == 1 else plural.format(n=count)
    return f"Used {tool_name} tool {count} time{'s' if count > 1 else ''}"


def summarize_tools(tool_names: list[str]) -> list[tuple[str, int]]:
    """Count calls per tool, in order of each tool's first appearance."""
    counts: dict[str, int] = {}
    for name in tool_names:
        counts[name] = counts.get(name, 0) + 1
    return list(counts.items())


def relevant_params(tool_name: str, tool_input) -> list[str]:
    """Pick the few parameters worth showing for a known tool."""
    if not isinstance(tool_input, dict):
        return []

    file_path = tool_input.get("file_path")
    command = tool_input.get("command")
    pattern = tool_input.get("pattern")

    if tool_name == "Read" and file_path:
        return [f"📄 {_basename(file_path)}"]
    if tool_name == "Edit" and file_path:
        return [f"✏️ {_basename(file_path)}"]
    if tool_name == "Write" and file_path:
        return [f"📝 {_basename(file_path)}"]
    if tool_name == "Bash" and command:
        command = str(command)
        if len(command) > COMMAND_PREVIEW_LENGTH:
            command = command[:COMMAND_PREVIEW_LENGTH] + ELLIPSIS
        return [f"💻 `{command}`"]
    if tool_name == "Grep" and pattern:
        return [f'🔍 Pattern: "{pattern}"']
    if tool_name == "Glob" and pattern:
        return [f'🗂️ Pattern: "{pattern}"']
    return []


def _basename(path) -> str:
    return str(path).split("/")[-1]
