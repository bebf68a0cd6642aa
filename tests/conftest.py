"""Shared test fixtures for claude-code-share."""

import json
import os
from datetime import datetime, timezone

import pytest

PROJECT_SLUG = "-Users-testuser-dev-myapp"
OTHER_SLUG = "-Users-testuser-dev-other"


def _ts(value: str) -> float:
    return datetime.fromisoformat(value).replace(tzinfo=timezone.utc).timestamp()


def _dump(lines) -> str:
    return "\n".join(line if isinstance(line, str) else json.dumps(line) for line in lines) + "\n"


@pytest.fixture
def write_jsonl():
    """Return a helper that writes dicts (or raw strings) as a JSONL file."""

    def write(path, lines, mtime=None):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(_dump(lines), encoding="utf-8")
        if mtime is not None:
            os.utime(path, (mtime, mtime))
        return path

    return write


@pytest.fixture
def tmp_log_dir(tmp_path, write_jsonl):
    """Create a synthetic Claude Code projects directory with realistic JSONL.

    session-001 includes:
    - file-history-snapshot and progress entries (should be skipped)
    - User text message
    - Assistant text + tool_use in the same entry, with usage
    - User tool_result entry
    - A malformed line (should be skipped)
    - A system entry (kept)
    """
    projects = tmp_path / "projects"
    project_dir = projects / PROJECT_SLUG

    write_jsonl(project_dir / "session-001.jsonl", [
        {
            "type": "file-history-snapshot",
            "messageId": "snap-1",
            "snapshot": {"trackedFileBackups": {}},
        },
        {
            "type": "user",
            "uuid": "u1",
            "parentUuid": None,
            "timestamp": "2025-01-20T10:00:00.000Z",
            "sessionId": "session-001",
            "version": "2.1.3",
            "cwd": "/Users/testuser/dev/myapp",
            "message": {"role": "user", "content": "Help me refactor the auth module"},
        },
        {
            "type": "assistant",
            "uuid": "a1",
            "parentUuid": "u1",
            "timestamp": "2025-01-20T10:00:05.000Z",
            "sessionId": "session-001",
            "message": {
                "model": "claude-opus-4-6",
                "role": "assistant",
                "content": [
                    {"type": "text", "text": "I'll start by reading the auth module."},
                    {
                        "type": "tool_use",
                        "id": "toolu_01",
                        "name": "Read",
                        "input": {"file_path": "/Users/testuser/dev/myapp/auth.py"},
                    },
                ],
                "usage": {
                    "input_tokens": 100,
                    "output_tokens": 50,
                    "cache_creation_input_tokens": 20,
                    "cache_read_input_tokens": 30,
                },
            },
        },
        {
            "type": "user",
            "uuid": "u2",
            "parentUuid": "a1",
            "timestamp": "2025-01-20T10:00:06.000Z",
            "sessionId": "session-001",
            "message": {
                "role": "user",
                "content": [
                    {
                        "type": "tool_result",
                        "tool_use_id": "toolu_01",
                        "content": "def authenticate(user):\n    return True",
                    },
                ],
            },
        },
        {
            "type": "progress",
            "timestamp": "2025-01-20T10:00:07.000Z",
            "sessionId": "session-001",
            "data": {"type": "hook_progress"},
        },
        '{"type": "assistant", "message": {"content": "truncated mid-wri',
        {
            "type": "assistant",
            "uuid": "a2",
            "parentUuid": "u2",
            "timestamp": "2025-01-20T10:01:00.000Z",
            "sessionId": "session-001",
            "message": {
                "model": "claude-opus-4-6",
                "role": "assistant",
                "content": [{"type": "text", "text": "Split validation into its own function."}],
                "usage": {"input_tokens": 200, "output_tokens": 80},
            },
        },
        {
            "type": "system",
            "uuid": "s1",
            "timestamp": "2025-01-20T10:02:00.000Z",
            "sessionId": "session-001",
            "message": {"content": "Conversation compacted"},
        },
    ], mtime=_ts("2025-01-20T10:02:00"))

    write_jsonl(project_dir / "session-002.jsonl", [
        {
            "type": "user",
            "uuid": "u1",
            "timestamp": "2025-01-21T09:00:00.000Z",
            "sessionId": "session-002",
            "message": {"role": "user", "content": "Write tests for the API"},
        },
        {
            "type": "assistant",
            "uuid": "a1",
            "timestamp": "2025-01-21T09:00:10.000Z",
            "sessionId": "session-002",
            "message": {
                "model": "claude-sonnet-4-5",
                "role": "assistant",
                "content": [{"type": "text", "text": "Sure."}],
                "usage": {"input_tokens": 10, "output_tokens": 5},
            },
        },
    ], mtime=_ts("2025-01-21T09:00:10"))

    write_jsonl(projects / OTHER_SLUG / "session-003.jsonl", [
        {
            "type": "user",
            "timestamp": "2024-12-01T08:00:00.000Z",
            "sessionId": "session-003",
            "message": {"role": "user", "content": "Old question"},
        },
    ], mtime=_ts("2024-12-01T08:00:00"))

    # Directories without transcripts and stray files are not projects
    (projects / "-Users-testuser-empty").mkdir()
    (projects / "-Users-testuser-empty" / "notes.txt").write_text("hi", encoding="utf-8")
    (projects / "stray.jsonl").write_text("{}\n", encoding="utf-8")

    return projects
