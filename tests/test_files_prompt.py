"""Tests for the file checklist prompt."""

from __future__ import annotations

import pytest

from glint.config import Config
from glint.git.repo import GitError
from glint.prompt import Cancelled, Candidate, Confirmed, FilesPrompt, Terminated
from glint.prompt.files_prompt import ALL_LABEL, CHECKED, INSTRUCTIONS, UNCHECKED

from .virtual_terminal import VirtualTerminal

UP = "\x1b[A"
DOWN = "\x1b[B"
SPACE = " "
ENTER = "\r"


class MarkTheme:
    """Leaves text alone except for brackets around the selected row."""

    banner = staticmethod(lambda s: s)
    selected = staticmethod(lambda s: f"[{s}]")
    overflow = staticmethod(lambda s: s)
    hint = staticmethod(lambda s: s)
    error = staticmethod(lambda s: f"!{s}")


def make_prompt(
    candidates: list[str] | None = None,
    *,
    terminal: VirtualTerminal | None = None,
    **kwargs,
) -> FilesPrompt:
    return FilesPrompt(
        terminal or VirtualTerminal(),
        candidates if candidates is not None else ["a.py", "b.py", "c.py"],
        theme=MarkTheme(),
        **kwargs,
    )


def press(prompt: FilesPrompt, *keys: str):
    result = None
    for key in keys:
        result = prompt.handle_input(key)
    return result


class TestToggle:
    def test_all_row_toggles_everything(self) -> None:
        prompt = make_prompt()
        press(prompt, SPACE)
        assert prompt.checked == [True, True, True]
        press(prompt, SPACE)
        assert prompt.checked == [False, False, False]

    def test_all_row_checks_everything_when_partial(self) -> None:
        prompt = make_prompt()
        press(prompt, DOWN, SPACE, UP, SPACE)
        assert prompt.checked == [True, True, True]

    def test_single_row(self) -> None:
        prompt = make_prompt()
        press(prompt, DOWN, DOWN, SPACE)
        assert prompt.checked == [False, True, False]
        assert not prompt.all_checked()

    def test_empty_candidate_list(self) -> None:
        prompt = make_prompt([])
        press(prompt, SPACE, DOWN)
        assert prompt.selected_index == 0
        assert press(prompt, ENTER) == Confirmed([])


class TestNavigation:
    def test_up_clamps_at_top(self) -> None:
        prompt = make_prompt()
        press(prompt, UP)
        assert prompt.selected_index == 0

    def test_down_clamps_at_bottom(self) -> None:
        prompt = make_prompt()
        press(prompt, *[DOWN] * 10)
        assert prompt.selected_index == 3

    def test_vim_keys(self) -> None:
        prompt = make_prompt()
        press(prompt, "j", "j", "k")
        assert prompt.selected_index == 1

    def test_unbound_key_is_ignored(self) -> None:
        prompt = make_prompt()
        assert press(prompt, "x") is None
        assert prompt.selected_index == 0
        assert prompt.checked == [False, False, False]


class TestResults:
    def test_confirm_keeps_candidate_order(self) -> None:
        prompt = make_prompt()
        press(prompt, DOWN, DOWN, DOWN, SPACE, UP, UP, SPACE)
        assert press(prompt, ENTER) == Confirmed(["a.py", "c.py"])

    def test_confirm_nothing_checked(self) -> None:
        assert press(make_prompt(), ENTER) == Confirmed([])

    def test_cancel(self) -> None:
        assert press(make_prompt(), "\x1b") == Cancelled()

    def test_terminate(self) -> None:
        assert press(make_prompt(), "\x03") == Terminated()

    def test_labels_do_not_leak_into_result(self) -> None:
        prompt = make_prompt([Candidate("new.py", "old.py -> new.py")])
        press(prompt, SPACE)
        assert press(prompt, ENTER) == Confirmed(["new.py"])


class TestRenderRows:
    def test_short_list(self) -> None:
        prompt = make_prompt()
        assert prompt.render_rows() == [
            f"[{UNCHECKED} {ALL_LABEL}]",
            f"{UNCHECKED} a.py",
            f"{UNCHECKED} b.py",
            f"{UNCHECKED} c.py",
        ]

    def test_checked_marks(self) -> None:
        prompt = make_prompt()
        press(prompt, DOWN, SPACE)
        rows = prompt.render_rows()
        assert rows[0] == f"{UNCHECKED} {ALL_LABEL}"
        assert rows[1] == f"[{CHECKED} a.py]"

    def test_all_row_checked_when_everything_is(self) -> None:
        prompt = make_prompt()
        press(prompt, SPACE)
        assert prompt.render_rows()[0] == f"[{CHECKED} {ALL_LABEL}]"

    def test_label_shown_instead_of_path(self) -> None:
        prompt = make_prompt([Candidate("new.py", "old.py -> new.py")])
        assert prompt.render_rows()[1] == f"{UNCHECKED} old.py -> new.py"

    def test_exactly_max_files_is_not_paginated(self) -> None:
        prompt = make_prompt([f"f{i}" for i in range(15)])
        rows = prompt.render_rows()
        assert len(rows) == 16
        assert not any(row.startswith("and ") for row in rows)

    def test_long_list_is_summarised(self) -> None:
        prompt = make_prompt([f"f{i}" for i in range(20)])
        rows = prompt.render_rows()
        assert len(rows) == 1 + 12 + 1
        assert rows[-2] == f"{UNCHECKED} f11"
        assert rows[-1] == "and 8 more"

    def test_hidden_selection_highlights_summary(self) -> None:
        prompt = make_prompt([f"f{i}" for i in range(20)])
        press(prompt, *[DOWN] * 15)
        assert prompt.selected_index == 15
        assert prompt.render_rows()[-1] == "[and 8 more]"
        assert prompt.cursor_row() == 13

    def test_max_files_from_config(self) -> None:
        prompt = make_prompt([f"f{i}" for i in range(6)], config=Config(max_files=5))
        rows = prompt.render_rows()
        assert len(rows) == 1 + 2 + 1
        assert rows[-1] == "and 4 more"


class TestDiffViewer:
    def test_all_row_diffs_everything(self) -> None:
        calls: list[list[str]] = []
        term = VirtualTerminal()
        prompt = make_prompt(terminal=term, diff_viewer=lambda paths: calls.append(list(paths)))
        press(prompt, "d")
        assert calls == [[]]
        assert term.suspend_count == 1

    def test_file_row_diffs_that_file(self) -> None:
        calls: list[list[str]] = []
        prompt = make_prompt(diff_viewer=lambda paths: calls.append(list(paths)))
        press(prompt, DOWN, DOWN, "d")
        assert calls == [["b.py"]]

    def test_no_viewer_is_a_no_op(self) -> None:
        prompt = make_prompt()
        assert press(prompt, "d") is None

    def test_failure_keeps_prompt_running(self) -> None:
        def boom(paths):
            raise GitError("no pager")

        term = VirtualTerminal(keys=["d", SPACE, ENTER])
        prompt = make_prompt(terminal=term, diff_viewer=boom)
        assert prompt.run() == Confirmed(["a.py", "b.py", "c.py"])
        assert "!diff failed: no pager" in term.output

    @pytest.mark.parametrize("error", [OSError("gone"), GitError("bad")])
    def test_failure_sets_status(self, error: Exception) -> None:
        def boom(paths):
            raise error

        prompt = make_prompt(diff_viewer=boom)
        assert press(prompt, "d") is None
        assert prompt._status is not None
        press(prompt, DOWN)
        assert prompt._status is None


class TestRun:
    def test_confirm_through_terminal(self) -> None:
        term = VirtualTerminal(keys=[SPACE, ENTER])
        prompt = make_prompt(terminal=term)
        assert prompt.run() == Confirmed(["a.py", "b.py", "c.py"])
        assert INSTRUCTIONS in term.output
        assert ALL_LABEL in term.output
        assert term.raw_entries == 1
        assert not term.raw

    def test_banner_is_drawn(self) -> None:
        term = VirtualTerminal(keys=["\x1b"])
        prompt = make_prompt(terminal=term, config=Config(banner=["~ banner ~"]))
        assert prompt.run() == Cancelled()
        assert "~ banner ~" in term.output

    def test_closed_input_terminates(self) -> None:
        term = VirtualTerminal()
        assert make_prompt(terminal=term).run() == Terminated()
        assert not term.raw

    def test_empty_wait_keeps_going(self) -> None:
        term = VirtualTerminal(keys=[None, None, ENTER])
        assert make_prompt(terminal=term).run() == Confirmed([])
