"""Tests for tablekit.wrap -- wrapping cell text to a column width."""

from __future__ import annotations

import pytest

from tablekit.width import BREAK_MARKER, ELLIPSIS, WidthMeasurer
from tablekit.wrap import Wrapper, wrap


def _widths(lines: list[str]) -> list[int]:
    m = WidthMeasurer()
    return [m.display_width(line) for line in lines]


class TestWrapCommon:
    def test_empty_text_yields_one_empty_line(self) -> None:
        for mode in ("none", "normal", "truncate", "break"):
            assert wrap("", 5, mode) == [""]

    def test_unknown_mode_raises(self) -> None:
        with pytest.raises(ValueError):
            wrap("abc", 5, "sideways")  # type: ignore[arg-type]

    def test_zero_width_is_unconstrained(self) -> None:
        assert wrap("a b c", 0) == ["a b c"]
        assert wrap("a b c", -3, "truncate") == ["a b c"]

    def test_newline_segments_wrap_independently(self) -> None:
        assert wrap("a\nb c", 10) == ["a", "b c"]

    def test_tabs_expanded_by_default(self) -> None:
        assert wrap("a\tb", 0, tab_width=4) == ["a   b"]

    def test_tabs_kept_when_trim_tab_is_off(self) -> None:
        assert Wrapper().wrap("a\tb", 10, trim_tab=False) == ["a\tb"]

    def test_ansi_codes_are_zero_width(self) -> None:
        assert wrap("\x1b[31mred\x1b[0m", 3) == ["\x1b[31mred\x1b[0m"]


class TestWrapNone:
    def test_splits_on_newlines_only(self) -> None:
        assert wrap("long text here\nmore", 3, "none") == ["long text here", "more"]


class TestWrapNormal:
    def test_greedy_word_wrap(self) -> None:
        assert wrap("the quick brown fox", 10) == ["the quick", "brown fox"]

    def test_collapses_runs_of_spaces(self) -> None:
        assert wrap("a    b", 10) == ["a b"]

    def test_hard_breaks_long_word(self) -> None:
        assert wrap("abcdefghij", 4) == ["abcd", "efgh", "ij"]

    def test_following_word_joins_last_piece(self) -> None:
        assert wrap("abcdef g", 4) == ["abcd", "ef g"]

    def test_wide_characters(self) -> None:
        assert wrap("世界世界", 4) == ["世界", "世界"]

    def test_lines_fit_width(self) -> None:
        text = "pack my box with five dozen liquor jugs"
        for width in range(4, 30):
            assert all(w <= width for w in _widths(wrap(text, width)))

    def test_line_count_never_grows_with_width(self) -> None:
        text = "the quick brown fox jumps over the lazy dog"
        counts = [len(wrap(text, width)) for width in range(5, 45)]
        assert counts == sorted(counts, reverse=True)
        assert counts[-1] == 1


class TestWrapTruncate:
    def test_cuts_with_ellipsis(self) -> None:
        assert wrap("hello world", 8, "truncate") == ["hello w" + ELLIPSIS]

    def test_text_that_fits_is_unchanged(self) -> None:
        assert wrap("hi", 8, "truncate") == ["hi"]

    def test_each_segment_truncated(self) -> None:
        assert wrap("abcdef\nxy", 4, "truncate") == ["abc" + ELLIPSIS, "xy"]

    def test_idempotent(self) -> None:
        w = Wrapper()
        for width in range(1, 12):
            once = w.truncate("truncate me please", width)
            assert w.truncate(once, width) == once

    def test_never_splits_wide_character(self) -> None:
        # "世" takes two columns, so only one fits beside the ellipsis
        assert wrap("世界世界", 4, "truncate") == ["世" + ELLIPSIS]

    def test_result_fits_width(self) -> None:
        for width in range(1, 12):
            (line,) = wrap("truncate me please", width, "truncate")
            assert WidthMeasurer().display_width(line) <= width


class TestWrapBreak:
    def test_marks_split_word(self) -> None:
        assert wrap("hello world", 8, "break") == ["hello w" + BREAK_MARKER, "orld"]

    def test_marks_hard_broken_word(self) -> None:
        assert wrap("abcdefgh", 4, "break") == [
            "abc" + BREAK_MARKER,
            "def" + BREAK_MARKER,
            "gh",
        ]

    def test_width_one_has_no_markers(self) -> None:
        assert wrap("abc", 1, "break") == ["a", "b", "c"]

    def test_words_that_fit_are_not_split(self) -> None:
        assert wrap("ab cd", 5, "break") == ["ab cd"]

    def test_lines_never_exceed_width(self) -> None:
        for text in ("hello wonderful world", "abcdefghijklmnop"):
            for width in range(2, 16):
                assert all(w <= width for w in _widths(wrap(text, width, "break")))

    def test_wide_lines_never_exceed_width(self) -> None:
        for width in range(2, 16):
            assert all(w <= width for w in _widths(wrap("世界世界 hello", width, "break")))

    def test_wide_character_at_width_two_drops_marker(self) -> None:
        assert wrap("世界", 2, "break") == ["世", "界"]
