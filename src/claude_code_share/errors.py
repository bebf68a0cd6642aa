"""Exceptions raised while reading transcripts."""


class ClaudeCodeShareError(Exception):
    """Base class for all claude-code-share errors."""


class DecodeError(ClaudeCodeShareError, ValueError):
    """A transcript line is not a valid log entry."""


class SessionReadError(ClaudeCodeShareError, OSError):
    """A transcript file could not be opened or read to the end."""


class DirectoryError(ClaudeCodeShareError, OSError):
    """The log directory or a project directory could not be listed."""


class NotFoundError(ClaudeCodeShareError, LookupError):
    """The requested project or session does not exist on disk."""


class ProjectNotFoundError(NotFoundError):
    pass


class SessionNotFoundError(NotFoundError):
    pass
