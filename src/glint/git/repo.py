"""Thin wrapper over the git binary."""

from __future__ import annotations

import itertools
import logging
import subprocess
from pathlib import Path
from typing import Iterable, Iterator, Sequence

from glint.git.log import CommitRecord, iter_logs
from glint.git.status import StatusItem, parse_status

logger = logging.getLogger(__name__)


class GitError(Exception):
    """Raised when git operations fail."""


class Git:
    """Runs git subcommands against one repository."""

    def __init__(self, root: Path) -> None:
        self.root = root

    @classmethod
    def from_cwd(cls) -> Git:
        """Locate the repository containing the current directory."""
        toplevel = _run_git(["rev-parse", "--show-toplevel"], cwd=None).strip()
        return cls(Path(toplevel))

    def _run(self, *args: str) -> str:
        return _run_git(list(args), cwd=self.root)

    def status(self) -> list[StatusItem]:
        return parse_status(self._run("status", "--porcelain", "-z"))

    def add(self, paths: Sequence[str]) -> None:
        if paths:
            self._run("add", "-A", "--", *paths)

    def commit(self, message: str) -> str:
        return self._run("commit", "-m", message)

    def diff(self, paths: Sequence[str]) -> None:
        """Show ``git diff`` for *paths* (everything when empty) in the pager.

        Runs attached to the terminal and returns when the pager exits.
        """
        cmd = ["git", "diff", "--", *paths]
        logger.debug("running %s", cmd)
        try:
            result = subprocess.run(cmd, cwd=self.root)
        except FileNotFoundError:
            raise GitError("Git is not installed or not in PATH")
        if result.returncode != 0:
            raise GitError(f"Git command failed: {' '.join(cmd)}")

    def log_lines(self, args: Iterable[str] = ()) -> Iterator[str]:
        """Stream ``git log --raw --pretty=raw`` output line by line."""
        # Merges need raw lines of their own to complete an entry
        cmd = ["git", "log", "--raw", "--pretty=raw", "--diff-merges=first-parent", *args]
        logger.debug("running %s", cmd)
        try:
            proc = subprocess.Popen(
                cmd,
                cwd=self.root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError:
            raise GitError("Git is not installed or not in PATH")

        assert proc.stdout is not None
        with proc:
            yield from proc.stdout
            stderr = proc.stderr.read() if proc.stderr else ""
        if proc.returncode != 0:
            raise GitError(f"Git command failed: {' '.join(cmd)}\n{stderr}")

    def log_parsed(self, args: Iterable[str] = ()) -> Iterator[CommitRecord]:
        # git does not close the last entry with a blank line
        return iter_logs(itertools.chain(self.log_lines(args), [""]))


def _run_git(args: list[str], cwd: Path | None) -> str:
    """Run a git command and return stdout."""
    logger.debug("running git %s", args)
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=True,
            encoding="utf-8",
            errors="replace",
        )
    except subprocess.CalledProcessError as e:
        raise GitError(f"Git command failed: git {' '.join(args)}\n{e.stderr}")
    except FileNotFoundError:
        raise GitError("Git is not installed or not in PATH")
    return result.stdout
