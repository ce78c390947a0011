"""Locate the end of a section inside a search window of the raw template."""

import logging
import re

from xgenerate.template.annotations import SectionAnnotation, SectionBoundsAnnotation

logger = logging.getLogger(__name__)


def _find_explicit_end(section: SectionAnnotation, text: str, search_begin: int) -> int | None:
    """End at the first occurrence of the end marker (optionally including it)."""
    end_index = text.find(section.end, search_begin)
    if end_index == -1:
        return None
    if section.include_end:
        end_index += len(section.end)
    return end_index


def _find_literal_on_last_line(
    section: SectionAnnotation, text: str, search_begin: int, search_end: int
) -> int | None:
    """End after the line holding the literal, including its line terminator."""
    pattern = re.compile(rf"{re.escape(section.literal_on_last_line)}.*\r?\n?")
    match = pattern.search(text, search_begin)
    if match is None or match.end() > search_end:
        return None
    return match.end()


def _find_nr_of_lines(section: SectionAnnotation, text: str, search_begin: int) -> int | None:
    """End just after the Nth newline counted from the search start."""
    end_index = search_begin - 1
    for _ in range(section.nr_of_lines):
        end_index = text.find("\n", end_index + 1)
        if end_index == -1:
            return None
    return end_index + 1


def find_section_end(
    bounds: SectionBoundsAnnotation,
    text: str,
    search_begin: int,
    search_end: int,
) -> int | None:
    """Find where the section of ``bounds`` ends.

    Exactly one end detection policy applies, checked in priority order:
    explicit end marker, literal on last line, number of lines (default 1).

    Args:
        bounds: The bounds annotation of the section being closed.
        text: The full raw template text.
        search_begin: Offset to start searching from.
        search_end: Offset the end may not lie beyond (typically the begin of
            the next annotation).

    Returns:
        The offset just past the last character of the section, or None when
        the end doesn't fall inside ``[search_begin, search_end]``. None means
        the caller has to defer the decision, it is not an error by itself.
    """
    section = bounds.section

    if section.end:
        end_index = _find_explicit_end(section, text, search_begin)
    elif section.literal_on_last_line:
        end_index = _find_literal_on_last_line(section, text, search_begin, search_end)
    else:
        end_index = _find_nr_of_lines(section, text, search_begin)

    if end_index is None or end_index > search_end:
        logger.debug(f"No end for section '{section.name}' between {search_begin} and {search_end}")
        return None

    return end_index
