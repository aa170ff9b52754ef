"""Tests for tablekit.width -- display width measurement."""

from __future__ import annotations

import pytest

from tablekit.width import (
    ELLIPSIS,
    WidthMeasurer,
    display_width,
    get_measurer,
    strip_ansi,
)


# ---------------------------------------------------------------------------
# display_width
# ---------------------------------------------------------------------------


class TestDisplayWidth:
    def test_plain_ascii(self) -> None:
        assert display_width("hello") == 5

    def test_empty_string(self) -> None:
        assert display_width("") == 0

    def test_ansi_codes_do_not_count(self) -> None:
        assert display_width("\x1b[31mred\x1b[0m") == 3

    def test_osc8_hyperlink_does_not_count(self) -> None:
        text = "\x1b]8;;https://example.com\x07link\x1b]8;;\x07"
        assert display_width(text) == 4

    def test_wide_characters_count_as_two(self) -> None:
        assert display_width("世界") == 4

    def test_combining_mark_adds_nothing(self) -> None:
        # "e" followed by a combining acute accent is one cluster
        assert display_width("é") == 1

    def test_emoji_counts_as_two(self) -> None:
        assert display_width("\U0001f600") == 2

    def test_multiline_measures_widest_line(self) -> None:
        assert display_width("ab\nabcd\nabc") == 4

    def test_tab_advances_to_next_stop(self) -> None:
        assert display_width("a\tb") == 9

    def test_tab_width_is_configurable(self) -> None:
        assert display_width("\tx", tab_width=4) == 5
        assert WidthMeasurer(tab_width=4).display_width("ab\tc") == 5


class TestEastAsian:
    def test_ambiguous_is_narrow_by_default(self) -> None:
        assert WidthMeasurer().display_width("α") == 1

    def test_ambiguous_is_wide_when_enabled(self) -> None:
        assert WidthMeasurer(east_asian=True).display_width("α") == 2

    def test_ascii_unaffected(self) -> None:
        assert WidthMeasurer(east_asian=True).display_width("abc") == 3


class TestMeasurer:
    def test_rejects_tab_width_below_one(self) -> None:
        with pytest.raises(ValueError):
            WidthMeasurer(tab_width=0)

    def test_shared_measurer_per_tab_width(self) -> None:
        assert get_measurer(4) is get_measurer(4)
        assert get_measurer(4) is not get_measurer(8)

    def test_cached_result_is_stable(self) -> None:
        m = WidthMeasurer()
        first = m.display_width("世界!")
        assert m.display_width("世界!") == first == 5

    def test_strip_ansi(self) -> None:
        assert strip_ansi("\x1b[1mbold\x1b[0m") == "bold"


# ---------------------------------------------------------------------------
# minimum_width
# ---------------------------------------------------------------------------


class TestMinimumWidth:
    def test_truncate_keeps_one_column_plus_marker(self) -> None:
        m = WidthMeasurer()
        assert m.minimum_width("hello", "truncate") == 1 + m.display_width(ELLIPSIS)

    def test_truncate_short_text(self) -> None:
        m = WidthMeasurer()
        assert m.minimum_width("", "truncate") == 0
        assert m.minimum_width("a", "truncate") == 1

    def test_normal_is_longest_word(self) -> None:
        assert WidthMeasurer().minimum_width("hello wonderful world", "normal") == 9

    def test_break_is_longest_word(self) -> None:
        assert WidthMeasurer().minimum_width("ab abcd\nabc", "break") == 4

    def test_none_is_full_width(self) -> None:
        assert WidthMeasurer().minimum_width("ab cd\nabc", "none") == 5


# ---------------------------------------------------------------------------
# expand_tabs / take_columns
# ---------------------------------------------------------------------------


class TestExpandTabs:
    def test_expands_to_tab_stop(self) -> None:
        assert WidthMeasurer(tab_width=4).expand_tabs("a\tb") == "a   b"

    def test_each_line_restarts_at_column_zero(self) -> None:
        assert WidthMeasurer(tab_width=4).expand_tabs("abc\td\n\te") == "abc d\n    e"

    def test_text_without_tabs_unchanged(self) -> None:
        assert WidthMeasurer().expand_tabs("plain") == "plain"


class TestTakeColumns:
    def test_ascii_prefix(self) -> None:
        assert WidthMeasurer().take_columns("hello", 3) == "hel"

    def test_never_splits_wide_character(self) -> None:
        assert WidthMeasurer().take_columns("世界x", 3) == "世"

    def test_preserves_ansi_codes(self) -> None:
        assert WidthMeasurer().take_columns("\x1b[1mhello", 2) == "\x1b[1mhe"

    def test_keeps_combining_marks_with_base(self) -> None:
        assert WidthMeasurer().take_columns("éx", 1) == "é"

    def test_zero_columns(self) -> None:
        assert WidthMeasurer().take_columns("abc", 0) == ""
