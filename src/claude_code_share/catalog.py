"""Project and session listings over the Claude Code log directory.

Layout::

    <log_dir>/<slug>/<session_id>.jsonl

Nothing is cached: every call rescans the directory and reparses the
transcripts it needs, so results always reflect what is on disk.
"""

import logging
import os
from datetime import datetime, timezone
from pathlib import Path

from .core import Conversation, Project, Session
from .errors import (
    DirectoryError,
    ProjectNotFoundError,
    SessionNotFoundError,
    SessionReadError,
)
from .parser import SESSION_SUFFIX, parse_session_file
from .slug import decode_slug

logger = logging.getLogger(__name__)

PREVIEW_MAX_BYTES = 120
TOOL_RESULTS_PREVIEW = "(tool results)"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def list_projects(log_dir: Path) -> list[Project]:
    """Return projects that have at least one session, most recent first."""
    log_dir = Path(log_dir)
    try:
        project_dirs = [d for d in log_dir.iterdir() if d.is_dir()]
    except OSError as e:
        raise DirectoryError(f"failed to read log directory {log_dir}: {e}") from e

    projects = []
    for project_dir in project_dirs:
        try:
            session_files = _session_files(project_dir)
        except OSError as e:
            logger.warning("Skipping unreadable project directory %s: %s", project_dir, e)
            continue
        if not session_files:
            continue

        projects.append(Project(
            slug=project_dir.name,
            path=decode_slug(project_dir.name),
            session_count=len(session_files),
            last_activity=_last_activity(session_files),
        ))

    projects.sort(key=lambda p: p.last_activity or _EPOCH, reverse=True)
    return projects


def list_sessions(log_dir: Path, slug: str) -> list[Session]:
    """Return summaries of every loadable session in a project, newest first.

    Session files that cannot be read are logged and left out.
    """
    project_dir = Path(log_dir) / slug
    if not _is_plain_name(slug) or not project_dir.is_dir():
        raise ProjectNotFoundError(f"project not found: {slug}")

    try:
        session_files = _session_files(project_dir)
    except OSError as e:
        raise DirectoryError(f"failed to read project directory {project_dir}: {e}") from e

    sessions = []
    for path in session_files:
        try:
            conv = parse_session_file(path)
        except (SessionReadError, SessionNotFoundError) as e:
            logger.warning("Skipping session file %s: %s", path, e)
            continue
        sessions.append(summarize_session(conv))

    sessions.sort(key=lambda s: s.timestamp or _EPOCH, reverse=True)
    return sessions


def load_session(log_dir: Path, slug: str, session_id: str) -> Conversation:
    """Load one session by project slug and session ID.

    Raises SessionNotFoundError when no such transcript exists.
    """
    if not _is_plain_name(slug) or not _is_plain_name(session_id):
        raise SessionNotFoundError(f"session not found: {slug}/{session_id}")
    return parse_session_file(Path(log_dir) / slug / f"{session_id}{SESSION_SUFFIX}")


def summarize_session(conv: Conversation) -> Session:
    """Derive the list-view summary of a loaded conversation.

    The timestamp comes from the first entry that has one, which need not
    be the first user entry the preview is taken from.
    """
    session = Session(
        id=conv.session_id,
        message_count=len(conv.entries),
        model=conv.model,
    )

    for entry in conv.entries:
        if session.timestamp is None:
            session.timestamp = entry.timestamp
        if entry.type == "user" and not session.first_message:
            text = entry.message.content.text
            if not text and entry.message.content.blocks:
                text = TOOL_RESULTS_PREVIEW
            session.first_message = truncate(text, PREVIEW_MAX_BYTES)
        if session.first_message and session.timestamp is not None:
            break

    return session


def truncate(text: str, max_bytes: int) -> str:
    """Cut text to max_bytes of UTF-8 and append "..." if anything was cut.

    A multi-byte character split by the cut is dropped.
    """
    encoded = text.encode("utf-8", errors="surrogatepass")
    if len(encoded) <= max_bytes:
        return text
    return encoded[:max_bytes].decode("utf-8", errors="ignore") + "..."


# ── Private helpers ──────────────────────────────────────────────


def _session_files(project_dir: Path) -> list[Path]:
    with os.scandir(project_dir) as it:
        return sorted(Path(e.path) for e in it if e.name.endswith(SESSION_SUFFIX))


def _last_activity(session_files: list[Path]) -> datetime | None:
    latest = None
    for path in session_files:
        try:
            mtime = path.stat().st_mtime
        except OSError as e:
            logger.debug("Cannot stat %s: %s", path, e)
            continue
        if latest is None or mtime > latest:
            latest = mtime

    if latest is None:
        return None
    return datetime.fromtimestamp(latest, tz=timezone.utc)


def _is_plain_name(name: str) -> bool:
    """True for a single path component that stays inside its parent."""
    if not name or name in (".", ".."):
        return False
    separators = {"/", "\0", os.sep} | ({os.altsep} if os.altsep else set())
    return not any(sep in name for sep in separators)
