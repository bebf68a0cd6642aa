"""Project directory slugs.

Claude Code names each project directory after the absolute workspace path
with every ``/`` replaced by ``-``, so ``/Users/foo/dev/app`` is stored as
``-Users-foo-dev-app``. The mapping is lossy: a ``-`` that was part of the
original path cannot be told apart from an encoded separator. Decoded paths
are for display only and are never used to touch the filesystem.
"""


def decode_slug(slug: str) -> str:
    """Convert a project slug back to the workspace path it was made from."""
    if not slug:
        return ""
    return slug.replace("-", "/")


def project_name(path: str) -> str:
    """Return the last component of a decoded path for display."""
    parts = path.rstrip("/").split("/")
    return parts[-1] if parts[-1] else path
