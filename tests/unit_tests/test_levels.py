"""
Severity level ordering and parsing.
"""

import pytest

from logrouter import Level


class TestLevelOrdering:
    def test_levels_are_totally_ordered(self) -> None:
        ordered = [Level.DEBUG, Level.INFO, Level.WARN, Level.ERROR, Level.DPANIC, Level.PANIC, Level.FATAL]
        assert sorted(ordered) == ordered

    def test_labels_are_lowercase_names(self) -> None:
        assert [lvl.label for lvl in Level] == ["debug", "info", "warn", "error", "dpanic", "panic", "fatal"]


class TestLevelParse:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("info", Level.INFO),
            ("ERROR", Level.ERROR),
            (" dpanic ", Level.DPANIC),
            ("warning", Level.WARN),
            ("critical", Level.FATAL),
            (2, Level.ERROR),
            (Level.PANIC, Level.PANIC),
        ],
    )
    def test_parse_accepts_names_aliases_and_values(self, raw, expected) -> None:
        assert Level.parse(raw) is expected

    def test_parse_rejects_unknown_names(self) -> None:
        with pytest.raises(ValueError, match="unknown log level"):
            Level.parse("verbose")
