"""Serialize conversations for the API and export them to Markdown and JSON."""

import json
from datetime import datetime
from typing import Any, Optional

from .core import ContentBlock, Conversation, LogEntry, Project, Session
from .slug import project_name


def has_text(blocks: list[ContentBlock]) -> bool:
    """Return True if the blocks contain at least one non-empty text block."""
    return any(b.type == "text" and b.text for b in blocks)


def format_tool_input(tool_input: dict[str, Any]) -> str:
    """Pretty-print a tool_use input map."""
    try:
        return json.dumps(tool_input, indent=2, ensure_ascii=False)
    except (TypeError, ValueError):
        return "{}"


def project_to_dict(project: Project) -> dict:
    return {
        "slug": project.slug,
        "path": project.path,
        "name": project_name(project.path),
        "session_count": project.session_count,
        "last_activity": _iso(project.last_activity),
    }


def session_to_dict(session: Session) -> dict:
    return {
        "id": session.id,
        "first_message": session.first_message,
        "timestamp": _iso(session.timestamp),
        "message_count": session.message_count,
        "model": session.model,
    }


def entry_to_dict(entry: LogEntry) -> dict:
    """Convert a LogEntry to a JSON-serializable dict.

    Content is emitted as ``text`` for plain-string messages and as
    ``blocks`` otherwise, never both.
    """
    message = entry.message
    content: dict[str, Any]
    if message.content.blocks:
        content = {"blocks": [_block_to_dict(b) for b in message.content.blocks]}
    else:
        content = {"text": message.content.text}

    usage = None
    if message.usage is not None:
        usage = {
            "input_tokens": message.usage.input_tokens,
            "output_tokens": message.usage.output_tokens,
            "cache_creation_input_tokens": message.usage.cache_creation_input_tokens,
            "cache_read_input_tokens": message.usage.cache_read_input_tokens,
        }

    return {
        "type": entry.type,
        "uuid": entry.uuid,
        "parent_uuid": entry.parent_uuid,
        "timestamp": _iso(entry.timestamp),
        "session_id": entry.session_id,
        "message": {
            "role": message.role,
            "model": message.model,
            "content": content,
            "usage": usage,
        },
    }


def conversation_to_dict(conv: Conversation) -> dict:
    return {
        "session_id": conv.session_id,
        "model": conv.model,
        "total_input": conv.total_input,
        "total_output": conv.total_output,
        "entries": [entry_to_dict(e) for e in conv.entries],
    }


def conversation_to_markdown(conv: Conversation, path: str = "") -> str:
    """Export a conversation as readable Markdown."""
    lines = [f"# Session {conv.session_id}", ""]

    if path:
        lines.append(f"**Project:** {path}")
    if conv.model:
        lines.append(f"**Model:** {conv.model}")
    lines.append(f"**Tokens:** {conv.total_input} in / {conv.total_output} out")
    lines.extend(["", "---", ""])

    for entry in conv.entries:
        content = entry.message.content
        role_label = (entry.message.role or entry.type).capitalize()
        if content.blocks and not has_text(content.blocks):
            role_label += " (tools)"
        ts = ""
        if entry.timestamp:
            ts = f" ({entry.timestamp.strftime('%Y-%m-%d %H:%M')})"
        lines.append(f"## {role_label}{ts}")
        lines.append("")

        if content.text:
            lines.append(content.text)
        for block in content.blocks:
            lines.extend(_block_to_markdown(block))
            lines.append("")
        lines.extend(["", "---", ""])

    return "\n".join(lines)


def conversation_to_json(conv: Conversation, slug: str = "", path: str = "") -> str:
    """Export a conversation as structured JSON."""
    data = {"slug": slug, "path": path, **conversation_to_dict(conv)}
    return json.dumps(data, indent=2, ensure_ascii=False)


def _block_to_dict(block: ContentBlock) -> dict:
    return {
        "type": block.type,
        "text": block.text,
        "id": block.id,
        "name": block.name,
        "input": block.input,
        "tool_use_id": block.tool_use_id,
        "content": block.content,
    }


def _block_to_markdown(block: ContentBlock) -> list[str]:
    if block.type == "text":
        return [block.text]

    if block.type == "tool_use":
        return [f"**Tool:** `{block.name}`", "", "```json", format_tool_input(block.input), "```"]

    if block.type == "tool_result":
        result = block.content
        if not isinstance(result, str):
            result = json.dumps(result, indent=2, ensure_ascii=False)
        return [f"**Tool result** `{block.tool_use_id}`", "", "```", result, "```"]

    return [f"_[{block.type or 'unknown'} block]_"]


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None
