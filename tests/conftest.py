"""Shared test fixtures for ccstat."""

import json

import pytest

MYAPP = "/Users/testuser/dev/myapp"
OTHER = "/Users/testuser/dev/other.site"


def jsonl(entries) -> str:
    """Serialize entries as JSONL; str entries are written verbatim."""
    return "\n".join(e if isinstance(e, str) else json.dumps(e) for e in entries)


def user(text, timestamp, uuid="u"):
    return {
        "type": "user",
        "message": {"role": "user", "content": text},
        "timestamp": timestamp,
        "uuid": uuid,
    }


def assistant(content, timestamp, uuid="a"):
    return {
        "type": "assistant",
        "message": {"role": "assistant", "content": content},
        "timestamp": timestamp,
        "uuid": uuid,
    }


@pytest.fixture
def data_file(tmp_path):
    """Create a synthetic home data file with two projects."""
    data = {
        "numStartups": 12,
        "projects": {
            MYAPP: {
                "history": [
                    {"display": "fix bug", "pastedContents": {}},
                    {"display": "add tests\nplease", "pastedContents": {}},
                ],
                "allowedTools": [],
            },
            OTHER: {
                "history": [{"display": "deploy the site", "pastedContents": {}}],
                "mcpServers": {"docs": {"command": "npx", "args": ["-y", "docs-server"] * 20}},
            },
        },
    }
    path = tmp_path / ".claude.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def projects_dir(tmp_path):
    """Create session logs for MYAPP split across two files."""
    projects = tmp_path / "projects"
    project_dir = projects / "-Users-testuser-dev-myapp"
    project_dir.mkdir(parents=True)

    session_1 = [
        user("Help me refactor the auth module", "2025-01-20T10:00:00Z", "uuid-001"),
        # System notice before any assistant activity: dropped
        {"type": "system", "content": "Session started", "level": "info", "timestamp": "2025-01-20T10:00:10Z"},
        assistant([
            {"type": "text", "text": "I'll help you refactor the auth module."},
            {"type": "tool_use", "id": "toolu_001", "name": "Read", "input": {"file_path": "/src/auth.ts"}},
        ], "2025-01-20T10:00:30Z", "uuid-002"),
        {
            "type": "user",
            "message": {"role": "user", "content": [
                {"type": "tool_result", "tool_use_id": "toolu_001", "content": "export function authenticate() {}"},
            ]},
            "timestamp": "2025-01-20T10:00:31Z",
            "uuid": "uuid-003",
        },
        assistant([
            {"type": "thinking", "thinking": "Split validation from token refresh."},
            {"type": "text", "text": "I can see the auth module.\n\nLet me refactor it."},
            {"type": "tool_use", "id": "toolu_002", "name": "Edit", "input": {"file_path": "/src/auth.ts", "new_string": "x"}},
        ], "2025-01-20T10:01:00Z", "uuid-004"),
        "this line is {not json",
        {"type": "system", "content": "Context low", "isMeta": True, "level": "warning", "timestamp": "2025-01-20T10:01:05Z"},
        {"type": "file-history-snapshot", "snapshot": {"files": []}},
    ]
    session_2 = [
        user("Now split it into files with Claude Code(beta)", "2025-01-20T10:05:00Z", "uuid-101"),
        assistant([
            {"type": "tool_use", "id": "toolu_003", "name": "Bash", "input": {"command": "mkdir -p /src/auth/"}},
        ], "2025-01-20T10:05:30Z", "uuid-102"),
        {"type": "summary", "summary": "Refactored auth module", "timestamp": "2025-01-20T10:06:00Z"},
        user("Add tests", "2025-01-20T10:10:00Z", "uuid-103"),
        "",
    ]
    (project_dir / "session-001.jsonl").write_text(jsonl(session_1), encoding="utf-8")
    (project_dir / "session-002.jsonl").write_text(jsonl(session_2), encoding="utf-8")
    (project_dir / "notes.txt").write_text("not a session log", encoding="utf-8")

    return projects


@pytest.fixture
def ccstat_env(monkeypatch, data_file, projects_dir):
    """Point ccstat at the synthetic data file and session logs."""
    monkeypatch.setenv("CCSTAT_DATA_FILE", str(data_file))
    monkeypatch.setenv("CCSTAT_PROJECTS_PATH", str(projects_dir))
    return data_file, projects_dir
