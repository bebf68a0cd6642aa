"""Core data models for claude-code-share."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass
class Usage:
    """Token accounting attached to an assistant message."""

    input_tokens: int = 0
    output_tokens: int = 0
    cache_creation_input_tokens: int = 0
    cache_read_input_tokens: int = 0


@dataclass
class ContentBlock:
    """One element of a structured content array.

    Only the fields relevant to ``type`` are populated; the rest keep
    their empty defaults.
    """

    type: str = ""
    text: str = ""
    # tool_use
    id: str = ""
    name: str = ""
    input: dict[str, Any] = field(default_factory=dict)
    # tool_result
    tool_use_id: str = ""
    content: Any = None  # string or nested blocks, stored as-is


@dataclass
class MessageContent:
    """Either plain text or a list of blocks, never both."""

    text: str = ""
    blocks: list[ContentBlock] = field(default_factory=list)


@dataclass
class Message:
    """The ``message`` payload of a log entry."""

    role: str = ""
    model: str = ""
    content: MessageContent = field(default_factory=MessageContent)
    usage: Optional[Usage] = None


@dataclass
class LogEntry:
    """A single line of a session transcript."""

    type: str
    uuid: str = ""
    parent_uuid: Optional[str] = None
    timestamp: Optional[datetime] = None
    session_id: str = ""
    version: str = ""
    cwd: str = ""
    message: Message = field(default_factory=Message)


@dataclass
class Project:
    """A project directory that contains session transcripts."""

    slug: str
    path: str  # decoded workspace path, e.g. "/Users/foo/dev/myapp"
    session_count: int
    last_activity: Optional[datetime] = None


@dataclass
class Session:
    """Summary of one session transcript for list views."""

    id: str  # file stem
    first_message: str = ""
    timestamp: Optional[datetime] = None
    message_count: int = 0
    model: str = ""


@dataclass
class Conversation:
    """All retained entries of one session plus its token totals."""

    session_id: str
    entries: list[LogEntry] = field(default_factory=list)
    total_input: int = 0
    total_output: int = 0
    model: str = ""
