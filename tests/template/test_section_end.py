"""Tests for section end detection."""

from xgenerate.template.annotations import SectionAnnotation, SectionBoundsAnnotation
from xgenerate.template.section_end import find_section_end


def make_bounds(**kwargs) -> SectionBoundsAnnotation:
    return SectionBoundsAnnotation(section=SectionAnnotation(name="S", **kwargs), begin_index=0)


class TestNrOfLines:
    """Tests for the line count policy (the default)."""

    def test_default_is_one_line(self) -> None:
        assert find_section_end(make_bounds(), "abc\ndef", 0, 7) == 4

    def test_multiple_lines(self) -> None:
        assert find_section_end(make_bounds(nr_of_lines=2), "a\nb\nc", 0, 5) == 4

    def test_counts_from_search_begin(self) -> None:
        assert find_section_end(make_bounds(), "a\nb\n", 2, 4) == 4

    def test_not_enough_lines(self) -> None:
        assert find_section_end(make_bounds(nr_of_lines=2), "abc\ndef", 0, 7) is None

    def test_no_newline(self) -> None:
        assert find_section_end(make_bounds(), "abc", 0, 3) is None


class TestExplicitEnd:
    """Tests for the explicit end marker policy."""

    def test_end_marker_excluded(self) -> None:
        assert find_section_end(make_bounds(end="END"), "hello ENDworld", 0, 14) == 6

    def test_end_marker_included(self) -> None:
        bounds = make_bounds(end="END", include_end=True)
        assert find_section_end(bounds, "hello ENDworld", 0, 14) == 9

    def test_end_marker_missing(self) -> None:
        assert find_section_end(make_bounds(end="END"), "hello world", 0, 11) is None

    def test_takes_precedence(self) -> None:
        """The end marker wins over the other policies."""
        bounds = make_bounds(end="END", literal_on_last_line="hello", nr_of_lines=1)
        assert find_section_end(bounds, "hello\nEND", 0, 9) == 6


class TestLiteralOnLastLine:
    """Tests for the literal-on-last-line policy."""

    def test_includes_rest_of_line(self) -> None:
        bounds = make_bounds(literal_on_last_line="STOP")
        assert find_section_end(bounds, "xxSTOP more\nrest", 0, 17) == 12

    def test_crlf_terminator(self) -> None:
        bounds = make_bounds(literal_on_last_line="STOP")
        assert find_section_end(bounds, "a STOP\r\nb", 0, 9) == 8

    def test_last_line_without_terminator(self) -> None:
        bounds = make_bounds(literal_on_last_line="STOP")
        assert find_section_end(bounds, "a STOP", 0, 6) == 6

    def test_literal_is_not_a_pattern(self) -> None:
        bounds = make_bounds(literal_on_last_line="a.b")
        assert find_section_end(bounds, "axb\na.b\n", 0, 8) == 8

    def test_literal_missing(self) -> None:
        bounds = make_bounds(literal_on_last_line="STOP")
        assert find_section_end(bounds, "nothing here\n", 0, 13) is None


class TestSearchWindow:
    """Tests for ends relative to the search window."""

    def test_end_beyond_window(self) -> None:
        assert find_section_end(make_bounds(), "abc\ndef", 0, 3) is None

    def test_end_at_window_end(self) -> None:
        assert find_section_end(make_bounds(), "abc\ndef", 0, 4) == 4

    def test_literal_beyond_window(self) -> None:
        bounds = make_bounds(literal_on_last_line="STOP")
        assert find_section_end(bounds, "aa\nSTOP\n", 0, 3) is None

    def test_explicit_end_beyond_window(self) -> None:
        bounds = make_bounds(end="END")
        assert find_section_end(bounds, "xx yy END", 0, 4) is None
