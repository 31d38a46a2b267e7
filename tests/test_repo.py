"""Tests for glint.git.repo against a scratch repository."""

from __future__ import annotations

import shutil
import subprocess

import pytest
from click.testing import CliRunner

from glint import cli
from glint.git.repo import Git, GitError
from glint.string import strip_ansi

# Entry as git prints it: the stream stops after the last file line
RAW_TAIL = [
    "commit 18d90e52cf8d6a486bee299b3949ebd213c85f2a\n",
    "committer A <a@x> 1568585467 -0700\n",
    "\n",
    "    docs(gif): updates usage gif\n",
    "\n",
    ":100644 100644 6bbe237 4fe5fc6 M\tassets/usage.gif\n",
]


@pytest.fixture
def repo(tmp_path, monkeypatch):
    if shutil.which("git") is None:
        pytest.skip("git not installed")
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "A U Thor")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "a@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "A U Thor")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "a@example.com")
    monkeypatch.setenv("GLINT_CONFIG_DIR", str(tmp_path / "config"))
    root = tmp_path / "repo"
    root.mkdir()
    git(root, "init", "-q")
    git(root, "config", "commit.gpgsign", "false")
    return root


def git(root, *args: str) -> None:
    subprocess.run(["git", *args], cwd=root, check=True, capture_output=True)


def commit_file(root, name: str, message: str) -> None:
    (root / name).write_text(message)
    git(root, "add", name)
    git(root, "commit", "-q", "-m", message)


def subjects(root, *args: str) -> list[str]:
    return [r.message.split("\n")[0] for r in Git(root).log_parsed(args)]


class TestLogParsed:
    def test_last_entry_without_trailing_blank(self, monkeypatch) -> None:
        monkeypatch.setattr(Git, "log_lines", lambda self, args=(): iter(RAW_TAIL))
        records = list(Git(None).log_parsed())
        assert [r.commit for r in records] == ["18d90e52cf8d6a486bee299b3949ebd213c85f2a"]
        assert records[0].files == ("assets/usage.gif",)

    def test_every_commit_in_range(self, repo) -> None:
        commit_file(repo, "a.txt", "feat: one")
        commit_file(repo, "b.txt", "fix(x): two")
        assert sorted(subjects(repo, "-2")) == ["feat: one", "fix(x): two"]

    def test_oldest_commit_listed(self, repo) -> None:
        commit_file(repo, "a.txt", "feat: one")
        assert subjects(repo) == ["feat: one"]

    def test_merge_does_not_swallow_next_commit(self, repo) -> None:
        commit_file(repo, "base.txt", "feat: base")
        git(repo, "branch", "side")
        commit_file(repo, "main.txt", "fix: main")
        git(repo, "checkout", "-q", "side")
        commit_file(repo, "side.txt", "feat: side")
        git(repo, "checkout", "-q", "-")
        git(repo, "merge", "-q", "--no-ff", "-m", "Merge branch 'side'", "side")
        commit_file(repo, "after.txt", "docs: after")

        records = list(Git(repo).log_parsed(["-10"]))
        assert sorted(r.message.split("\n")[0] for r in records) == [
            "Merge branch 'side'",
            "docs: after",
            "feat: base",
            "feat: side",
            "fix: main",
        ]
        merge = next(r for r in records if r.message.startswith("Merge"))
        assert merge.message == "Merge branch 'side'"
        assert merge.files == ("side.txt",)

    def test_bad_revision_raises(self, repo) -> None:
        commit_file(repo, "a.txt", "feat: one")
        with pytest.raises(GitError):
            list(Git(repo).log_parsed(["no-such-branch"]))


class TestLogCommand:
    def test_prints_all_requested_commits(self, repo, monkeypatch) -> None:
        commit_file(repo, "a.txt", "feat: one")
        commit_file(repo, "b.txt", "fix(x): two")
        monkeypatch.chdir(repo)

        result = CliRunner().invoke(cli.main, ["log", "-n", "2"])
        assert result.exit_code == 0, result.output
        lines = strip_ansi(result.output).splitlines()
        assert len(lines) == 2
        assert any(line.endswith("feat: one") for line in lines)
        assert any(line.endswith("fix(x): two") for line in lines)
