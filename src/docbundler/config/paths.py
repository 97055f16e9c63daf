"""Path resolution for docbundler – single source of truth for the repo root."""

from pathlib import Path
import os


def get_repo_root() -> Path:
    """Return the absolute path to the repository being documented.

    Checks environment variable DOCBUNDLER_REPO_ROOT first; otherwise the
    current working directory.
    """
    env_path = os.environ.get("DOCBUNDLER_REPO_ROOT")
    if env_path:
        return Path(env_path).resolve()
    return Path.cwd().resolve()
