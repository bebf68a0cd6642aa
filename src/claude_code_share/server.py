"""FastAPI web server for claude-code-share."""

import logging
from pathlib import Path

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import HTMLResponse, Response

from .catalog import list_projects, list_sessions, load_session
from .config import get_log_dir
from .core import Conversation
from .errors import ClaudeCodeShareError, NotFoundError
from .export import (
    conversation_to_dict,
    conversation_to_json,
    conversation_to_markdown,
    project_to_dict,
    session_to_dict,
)
from .slug import decode_slug

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"


def create_app(log_dir: Path | None = None) -> FastAPI:
    """Build the application.

    With no log_dir the directory is resolved from the environment on
    every request.
    """
    app = FastAPI(title="claude-code-share", version="0.1.0")

    def _log_dir() -> Path:
        return log_dir if log_dir is not None else get_log_dir()

    def _load(slug: str, session_id: str) -> Conversation:
        try:
            return load_session(_log_dir(), slug, session_id)
        except NotFoundError:
            raise HTTPException(status_code=404, detail="Session not found")
        except ClaudeCodeShareError as e:
            logger.error("Failed to load session %s/%s: %s", slug, session_id, e)
            raise HTTPException(status_code=500, detail="Internal Server Error")

    # ── Routes ───────────────────────────────────────────────────────

    @app.get("/")
    async def index():
        """Serve the frontend."""
        html_path = STATIC_DIR / "index.html"
        if not html_path.exists():
            raise HTTPException(status_code=404, detail="Frontend not found")
        return HTMLResponse(html_path.read_text(encoding="utf-8"))

    @app.get("/api/projects")
    def get_projects():
        """Return all projects, most recently active first."""
        try:
            projects = list_projects(_log_dir())
        except ClaudeCodeShareError as e:
            logger.error("Failed to list projects: %s", e)
            raise HTTPException(status_code=500, detail="Internal Server Error")
        return [project_to_dict(p) for p in projects]

    @app.get("/api/projects/{slug}")
    def get_project(slug: str):
        """Return the sessions of one project, newest first."""
        try:
            sessions = list_sessions(_log_dir(), slug)
        except NotFoundError:
            raise HTTPException(status_code=404, detail="Project not found")
        except ClaudeCodeShareError as e:
            logger.error("Failed to list sessions for %s: %s", slug, e)
            raise HTTPException(status_code=500, detail="Internal Server Error")

        return {
            "slug": slug,
            "path": decode_slug(slug),
            "sessions": [session_to_dict(s) for s in sessions],
        }

    @app.get("/api/sessions/{slug}/{session_id}")
    def get_session(slug: str, session_id: str):
        """Return the full conversation of one session."""
        conv = _load(slug, session_id)
        return {
            "slug": slug,
            "path": decode_slug(slug),
            "session_id": session_id,
            "conversation": conversation_to_dict(conv),
        }

    @app.get("/api/export/{slug}/{session_id}")
    def export_session(
        slug: str,
        session_id: str,
        format: str = Query("md", description="Export format: md or json"),
    ):
        """Export a session as Markdown or JSON."""
        conv = _load(slug, session_id)
        path = decode_slug(slug)
        safe_name = "".join(c if c.isalnum() or c in "-_" else "" for c in session_id)[:50]

        if format == "json":
            return Response(
                content=conversation_to_json(conv, slug, path),
                media_type="application/json",
                headers={"Content-Disposition": f'attachment; filename="{safe_name}.json"'},
            )
        return Response(
            content=conversation_to_markdown(conv, path),
            media_type="text/markdown",
            headers={"Content-Disposition": f'attachment; filename="{safe_name}.md"'},
        )

    return app


app = create_app()
