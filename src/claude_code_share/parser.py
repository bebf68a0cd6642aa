"""Claude Code transcript parser.

Each session is a ``.jsonl`` file with one JSON object per line. Lines are
decoded into :class:`LogEntry` objects and folded into a
:class:`Conversation`.

JSONL entry types:
- "user": User prompts. Content is a string, or an array of blocks when the
  entry carries tool_result blocks.
- "assistant": Model responses. Content is an array of text and/or tool_use
  blocks; completed calls carry a usage object.
- "progress", "file-history-snapshot": Noise, dropped.
- Anything else is kept as-is.

Damaged input is tolerated line by line: a malformed line is logged and
skipped, a malformed block array becomes an empty block list. Only a
failure to read the file itself aborts the parse.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, BinaryIO, Iterator, Optional

from .core import ContentBlock, Conversation, LogEntry, Message, MessageContent, Usage
from .errors import DecodeError, SessionNotFoundError, SessionReadError

logger = logging.getLogger(__name__)

SESSION_SUFFIX = ".jsonl"
MAX_LINE_BYTES = 10 * 1024 * 1024
NOISE_TYPES = frozenset({"progress", "file-history-snapshot"})

_READ_CHUNK = 64 * 1024


def parse_entry(line: bytes | str) -> LogEntry:
    """Parse a single JSONL line into a LogEntry.

    Raises DecodeError if the line is not a JSON object or one of its known
    fields has the wrong shape. Unknown fields are ignored.
    """
    try:
        raw = _scrub_surrogates(json.loads(line))
    except (ValueError, RecursionError) as e:  # JSONDecodeError, UnicodeDecodeError, deep nesting
        raise DecodeError(f"invalid JSON: {e}") from e

    if not isinstance(raw, dict):
        raise DecodeError(f"expected a JSON object, got {type(raw).__name__}")

    return LogEntry(
        type=_string(raw, "type"),
        uuid=_string(raw, "uuid"),
        parent_uuid=_string(raw, "parentUuid") if raw.get("parentUuid") is not None else None,
        timestamp=_timestamp(raw.get("timestamp")),
        session_id=_string(raw, "sessionId"),
        version=_string(raw, "version"),
        cwd=_string(raw, "cwd"),
        message=_parse_message(_object(raw, "message") or {}),
    )


def parse_session_file(path: Path) -> Conversation:
    """Read a session transcript and return its Conversation.

    Malformed lines, oversized lines and noise entries are skipped. Raises
    SessionNotFoundError if the file does not exist and SessionReadError if
    it cannot be opened or read to the end.
    """
    path = Path(path)
    conv = Conversation(session_id=session_id_from_path(path))

    try:
        with path.open("rb") as f:
            for line_num, line in _read_lines(f, path):
                line = line.strip()
                if not line:
                    continue

                try:
                    entry = parse_entry(line)
                except DecodeError as e:
                    logger.warning("Skipping malformed line at %s:%d: %s", path, line_num, e)
                    continue

                if entry.type in NOISE_TYPES:
                    continue

                usage = entry.message.usage
                if usage is not None:
                    conv.total_input += usage.input_tokens
                    conv.total_output += usage.output_tokens

                # First model seen wins
                if not conv.model and entry.message.model:
                    conv.model = entry.message.model

                conv.entries.append(entry)
    except FileNotFoundError as e:
        raise SessionNotFoundError(f"session file not found: {path}") from e
    except OSError as e:
        raise SessionReadError(f"failed to read session file {path}: {e}") from e

    return conv


def session_id_from_path(path: Path) -> str:
    """Session IDs are the transcript file name without its suffix."""
    return Path(path).name.removesuffix(SESSION_SUFFIX)


# ── Private helpers ──────────────────────────────────────────────


def _read_lines(f: BinaryIO, path: Path) -> Iterator[tuple[int, bytes]]:
    """Yield (line number, raw line), skipping lines over MAX_LINE_BYTES.

    An overlong line is drained in chunks so it is never held in memory
    as a whole.
    """
    line_num = 0
    while True:
        line = f.readline(MAX_LINE_BYTES + 1)
        if not line:
            return
        line_num += 1

        if len(line) > MAX_LINE_BYTES and not line.endswith(b"\n"):
            logger.warning(
                "Skipping line over %d bytes at %s:%d", MAX_LINE_BYTES, path, line_num
            )
            while True:
                rest = f.readline(_READ_CHUNK)
                if not rest or rest.endswith(b"\n"):
                    break
            continue

        yield line_num, line


def _scrub_surrogates(value: Any) -> Any:
    """Replace lone surrogates (from unpaired \\uD8xx escapes) with U+FFFD.

    Decoded strings must always be encodable as UTF-8.
    """
    if isinstance(value, str):
        return value.encode("utf-8", "surrogatepass").decode("utf-8", "replace")
    if isinstance(value, list):
        return [_scrub_surrogates(v) for v in value]
    if isinstance(value, dict):
        return {_scrub_surrogates(k): _scrub_surrogates(v) for k, v in value.items()}
    return value


def _parse_message(raw: dict[str, Any]) -> Message:
    usage = _object(raw, "usage")
    return Message(
        role=_string(raw, "role"),
        model=_string(raw, "model"),
        content=_parse_content(raw.get("content")),
        usage=_parse_usage(usage) if usage is not None else None,
    )


def _parse_content(raw: Any) -> MessageContent:
    """Resolve the string-or-array content field once, here."""
    if isinstance(raw, str):
        return MessageContent(text=raw)

    if isinstance(raw, list):
        try:
            blocks = [_parse_block(item) for item in raw]
        except DecodeError as e:
            logger.warning("Failed to parse content blocks: %s", e)
            blocks = []
        return MessageContent(blocks=blocks)

    return MessageContent()


def _parse_block(raw: Any) -> ContentBlock:
    if not isinstance(raw, dict):
        raise DecodeError(f"content block: expected an object, got {type(raw).__name__}")

    return ContentBlock(
        type=_string(raw, "type"),
        text=_string(raw, "text"),
        id=_string(raw, "id"),
        name=_string(raw, "name"),
        input=_object(raw, "input") or {},
        tool_use_id=_string(raw, "tool_use_id"),
        content=raw.get("content"),
    )


def _parse_usage(raw: dict[str, Any]) -> Usage:
    return Usage(
        input_tokens=_integer(raw, "input_tokens"),
        output_tokens=_integer(raw, "output_tokens"),
        cache_creation_input_tokens=_integer(raw, "cache_creation_input_tokens"),
        cache_read_input_tokens=_integer(raw, "cache_read_input_tokens"),
    )


def _string(obj: dict[str, Any], key: str) -> str:
    value = obj.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DecodeError(f"field {key!r}: expected a string, got {type(value).__name__}")
    return value


def _integer(obj: dict[str, Any], key: str) -> int:
    value = obj.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"field {key!r}: expected an integer, got {type(value).__name__}")
    return value


def _object(obj: dict[str, Any], key: str) -> Optional[dict[str, Any]]:
    value = obj.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise DecodeError(f"field {key!r}: expected an object, got {type(value).__name__}")
    return value


def _timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp; naive values are taken as UTC."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise DecodeError(f"field 'timestamp': expected a string, got {type(value).__name__}")
    try:
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        raise DecodeError(f"field 'timestamp': {e}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
