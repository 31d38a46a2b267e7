"""Git collaborators: history parsing, status parsing, subprocess wrapper."""

from glint.git.log import CommitRecord, iter_logs, parse_logs
from glint.git.repo import Git, GitError
from glint.git.status import StatusItem, parse_status

__all__ = [
    "CommitRecord",
    "Git",
    "GitError",
    "StatusItem",
    "iter_logs",
    "parse_logs",
    "parse_status",
]
