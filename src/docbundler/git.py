"""
Git operations for docbundler.

- checkout: switch the working tree to a tag, branch or ``-``
- checked_out: scoped checkout that restores the previous ref on exit
- submodule / deinit: an isolated checkout (a detached worktree) used to
  build dependency versions without disturbing the main tree
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

from docbundler.config import defaults
from docbundler.models import GitError

logger = logging.getLogger(__name__)


def _run_git(
    args: List[str],
    cwd: Optional[Path] = None,
    timeout: int = defaults.GIT_TIMEOUT_SECONDS,
) -> subprocess.CompletedProcess:
    """Shared subprocess.run wrapper for git commands.

    Raises:
        GitError: If git exits non-zero or times out.
    """
    cmd = ["git"] + args
    logger.debug("Running: %s (cwd=%s)", " ".join(cmd), cwd)

    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            env=os.environ.copy(),
        )
    except subprocess.TimeoutExpired as e:
        raise GitError(args, -1, f"timed out after {timeout}s") from e

    if result.returncode != 0:
        raise GitError(args, result.returncode, result.stderr or "")
    return result


class Submodule:
    """An isolated checkout of the repository at ``cwd``."""

    def __init__(self, repo: "GitRepo", name: str, cwd: Path):
        self.repo = repo
        self.name = name
        self.cwd = cwd

    def checkout(self, ref: str) -> None:
        logger.info("Checking out %s in %s", ref, self.name)
        _run_git(["checkout", "--force", ref], cwd=self.cwd, timeout=self.repo.timeout)

    def __repr__(self) -> str:
        return f"Submodule(name={self.name!r}, cwd={str(self.cwd)!r})"


class GitRepo:
    """Source-control collaborator bound to one repository root."""

    def __init__(self, root: Path, timeout: int = defaults.GIT_TIMEOUT_SECONDS):
        self.root = Path(root)
        self.timeout = timeout

    def _git(self, args: List[str], cwd: Optional[Path] = None) -> subprocess.CompletedProcess:
        return _run_git(args, cwd=cwd or self.root, timeout=self.timeout)

    def current_ref(self) -> str:
        """Branch name, or the commit SHA when HEAD is detached."""
        branch = self._git(["rev-parse", "--abbrev-ref", "HEAD"]).stdout.strip()
        if branch and branch != "HEAD":
            return branch
        return self._git(["rev-parse", "HEAD"]).stdout.strip()

    def checkout(self, ref: str) -> None:
        logger.info("Checking out %s", ref)
        self._git(["checkout", ref])

    @contextmanager
    def checked_out(self, ref: str) -> Iterator[str]:
        """Check out ``ref`` for the duration of the block.

        The previous ref is restored on every exit path, including errors.
        """
        previous = self.current_ref()
        self.checkout(ref)
        try:
            yield ref
        finally:
            self.checkout(previous)

    def submodule(self, branch: str, name: str) -> Submodule:
        """Create an isolated checkout of ``branch`` under ``<root>/<name>``."""
        path = self.root / name
        if path.exists():
            logger.warning("Removing stale checkout at %s", path)
            self._prune(path)
        self._git(["worktree", "add", "--force", "--detach", str(path), branch])
        logger.info("Created isolated checkout %s at %s", name, branch)
        return Submodule(self, name, path)

    def deinit(self, submodule: Submodule) -> None:
        """Remove an isolated checkout created by ``submodule``."""
        self._git(["worktree", "remove", "--force", str(submodule.cwd)])
        logger.info("Removed isolated checkout %s", submodule.name)

    def _prune(self, path: Path) -> None:
        shutil.rmtree(path)
        self._git(["worktree", "prune"])

    @contextmanager
    def isolated(self, branch: str, name: str) -> Iterator[Submodule]:
        submodule = self.submodule(branch, name)
        try:
            yield submodule
        finally:
            self.deinit(submodule)
