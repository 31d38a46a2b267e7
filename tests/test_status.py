"""Tests for glint.git.status."""

from __future__ import annotations

from glint.git.status import StatusItem, parse_status


class TestParseStatus:
    def test_empty(self) -> None:
        assert parse_status("") == []

    def test_modified_and_untracked(self) -> None:
        items = parse_status(" M src/a.py\0?? new file.txt\0")
        assert items == [
            StatusItem(" ", "M", "src/a.py"),
            StatusItem("?", "?", "new file.txt"),
        ]

    def test_rename_consumes_source_entry(self) -> None:
        items = parse_status("R  new.py\0old.py\0A  added.py\0")
        assert items == [
            StatusItem("R", " ", "new.py", "old.py"),
            StatusItem("A", " ", "added.py"),
        ]
        assert items[0].label() == "old.py -> new.py"

    def test_plain_label_is_path(self) -> None:
        assert StatusItem("M", " ", "x.py").label() == "x.py"
