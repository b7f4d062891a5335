"""
Git-backed version log.

Each snapshot runs the equivalent of:
    git add -A
    git commit --allow-empty -m "<message>"

with author and committer pinned to the configured identity, so commits
don't depend on the user's git configuration.

Invariants:
    - The repository root is the store base path
    - commit() returns the sha of the new HEAD
    - Any git failure raises VersionLogError; nothing is retried

How to change safely:
    - Keep git invocations non-interactive (no editor, no pager, no signing)
    - Test against repositories that already contain history
"""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..errors import VersionLogError

logger = logging.getLogger(__name__)

DEFAULT_AUTHOR_NAME = "DocVault"
DEFAULT_AUTHOR_EMAIL = "docvault@example.com"

# Unit separator between fields, record separator between commits
_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = _FIELD_SEP.join(["%H", "%an", "%ae", "%at", "%B"]) + _RECORD_SEP


@dataclass(frozen=True)
class CommitInfo:
    """One entry of the audit trail.

    Attributes:
        sha: Commit hash
        message: Commit message (e.g. "Create document user1")
        author_name: Author name
        author_email: Author email
        timestamp: Author time (unix seconds)
    """

    sha: str
    message: str
    author_name: str
    author_email: str
    timestamp: int

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for output."""
        return {
            "sha": self.sha,
            "message": self.message,
            "author_name": self.author_name,
            "author_email": self.author_email,
            "timestamp": self.timestamp,
        }


class VersionLog:
    """Snapshots the store directory into git after each mutation.

    Attributes:
        repo_path: Working tree root (the store base path)
        author_name: Name used for author and committer
        author_email: Email used for author and committer

    Example:
        >>> log = VersionLog("/var/lib/docvault")
        >>> sha = log.commit("Create document user1")
        >>> log.history(limit=1)[0].message
        'Create document user1'
    """

    def __init__(
        self,
        repo_path: str | Path,
        author_name: str = DEFAULT_AUTHOR_NAME,
        author_email: str = DEFAULT_AUTHOR_EMAIL,
        git_binary: str = "git",
    ) -> None:
        """Open the repository at repo_path, initializing it if needed.

        Args:
            repo_path: Store base path
            author_name: Fixed author/committer name
            author_email: Fixed author/committer email
            git_binary: git executable to invoke

        Raises:
            VersionLogError: If the repository cannot be initialized
        """
        self.repo_path = Path(repo_path)
        self.author_name = author_name
        self.author_email = author_email
        self.git_binary = git_binary

        self.repo_path.mkdir(parents=True, exist_ok=True)
        if not (self.repo_path / ".git").exists():
            self._git("init", "--quiet")
            logger.info("Initialized version log", extra={"repo_path": str(self.repo_path)})

    def _env(self) -> dict[str, str]:
        env = dict(os.environ)
        env.update(
            {
                "GIT_AUTHOR_NAME": self.author_name,
                "GIT_AUTHOR_EMAIL": self.author_email,
                "GIT_COMMITTER_NAME": self.author_name,
                "GIT_COMMITTER_EMAIL": self.author_email,
                "GIT_TERMINAL_PROMPT": "0",
                "GIT_PAGER": "cat",
            }
        )
        return env

    def _git(self, *args: str) -> str:
        """Run a git command in the repository.

        Returns:
            Captured standard output

        Raises:
            VersionLogError: If git is missing or exits non-zero
        """
        command = [
            self.git_binary,
            "-c", "commit.gpgsign=false",
            "-c", "core.autocrlf=false",
            *args,
        ]
        try:
            result = subprocess.run(
                command,
                cwd=self.repo_path,
                env=self._env(),
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            raise VersionLogError(f"Failed to run git: {e}", command=command) from e

        if result.returncode != 0:
            stderr = result.stderr.strip()
            raise VersionLogError(
                f"git {args[0]} failed (exit {result.returncode}): {stderr}",
                command=command,
                stderr=stderr,
            )
        return result.stdout

    def head(self) -> Optional[str]:
        """Sha of the current HEAD commit, or None for an empty repository."""
        try:
            return self._git("rev-parse", "--verify", "--quiet", "HEAD").strip() or None
        except VersionLogError:
            # rev-parse --verify exits 1 when HEAD is unborn
            return None

    def commit(self, message: str) -> str:
        """Stage the whole tree and commit it.

        Args:
            message: Commit message

        Returns:
            Sha of the new commit
        """
        self._git("add", "--all", ".")
        self._git("commit", "--quiet", "--allow-empty", "--no-verify", "-m", message)
        sha = self._git("rev-parse", "HEAD").strip()
        logger.info("Committed snapshot", extra={"sha": sha, "commit_message": message})
        return sha

    def history(self, limit: Optional[int] = None) -> list[CommitInfo]:
        """List commits newest first.

        Args:
            limit: Maximum number of commits to return

        Returns:
            Commits, empty for a repository with no commits
        """
        if self.head() is None:
            return []

        args = ["log", f"--format={_LOG_FORMAT}"]
        if limit is not None:
            args.append(f"--max-count={limit}")
        output = self._git(*args)

        commits = []
        for record in output.split(_RECORD_SEP):
            record = record.strip("\n")
            if not record:
                continue
            sha, name, email, timestamp, message = record.split(_FIELD_SEP, 4)
            commits.append(
                CommitInfo(
                    sha=sha,
                    message=message.strip(),
                    author_name=name,
                    author_email=email,
                    timestamp=int(timestamp),
                )
            )
        return commits
