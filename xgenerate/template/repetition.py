"""Split whitespace around prefix/suffix repetition markers.

Repeated separators have to sit next to the repeated content, not swallow
the indentation before it or the line terminator after it. The whitespace
is therefore carved out of the raw text into its own raw section:

    <whitespace><prefix>content            (prefix)
    content<suffix><whitespace>            (suffix)
"""

from __future__ import annotations

import logging
import re

from xgenerate.models.enums import RepetitionType
from xgenerate.template.annotations import SectionAnnotation
from xgenerate.template.sections import RawTemplateSection, RepetitionTemplateSection

logger = logging.getLogger(__name__)

# Spaces and tabs only, the prefix never moves past a line boundary.
_LEADING_WHITESPACE = re.compile(r"[ \t]+")
# Any whitespace run that reaches the end of the search range.
_TRAILING_WHITESPACE = re.compile(r"[ \t\n\x0b\f\r]+\Z")


def split_prefix(
    section: SectionAnnotation,
    text: str,
    section_start: int,
    window_end: int | None = None,
) -> tuple[RawTemplateSection | None, RepetitionTemplateSection]:
    """Place the prefix repetition after any indentation at the section start.

    Args:
        section: The section declaration holding the prefix literal.
        text: The full raw template text.
        section_start: Offset where the section content starts.
        window_end: Offset the indentation may not run past, typically the
            begin of the next annotation. Defaults to the end of the text.

    Returns:
        A raw section for the leading spaces/tabs (None when there are none)
        and the prefix repetition section positioned right after them.
    """
    if window_end is None:
        window_end = len(text)
    whitespace = _LEADING_WHITESPACE.match(text, section_start, window_end)
    if whitespace is not None:
        logger.debug(
            f"Whitespace found between {whitespace.start()} and {whitespace.end()}, "
            "so creating separate sections."
        )
        raw = RawTemplateSection.from_text(text, whitespace.start(), whitespace.end())
        repetition_index = whitespace.end()
    else:
        logger.debug("No whitespace found, so creating prefix repetition section at the start.")
        raw = None
        repetition_index = section_start

    repetition = RepetitionTemplateSection(
        content=section.prefix or "",
        index=repetition_index,
        repetition_type=RepetitionType.PREFIX,
        repetition_style=section.prefix_style,
        repetition_action=section.prefix_action,
    )
    return raw, repetition


def split_suffix(
    section: SectionAnnotation, text: str, content_start: int, section_end: int
) -> tuple[RawTemplateSection, RepetitionTemplateSection | None, RawTemplateSection | None]:
    """Place the suffix repetition before any whitespace at the section end.

    Args:
        section: The section declaration, possibly holding a suffix literal.
        text: The full raw template text.
        content_start: Offset of the first character still to be emitted.
        section_end: Resolved end offset of the section.

    Returns:
        The raw content section, the suffix repetition section (None when the
        section has no suffix) and a raw section for the trailing whitespace
        (None when there is none, or no suffix).
    """
    if not section.has_suffix:
        return RawTemplateSection.from_text(text, content_start, section_end), None, None

    whitespace = _TRAILING_WHITESPACE.search(text, content_start, section_end)
    if whitespace is not None:
        logger.debug(
            f"Whitespace found between {whitespace.start()} and {whitespace.end()}, "
            "so creating separate sections."
        )
        content = RawTemplateSection.from_text(text, content_start, whitespace.start())
        trailing = RawTemplateSection.from_text(text, whitespace.start(), whitespace.end())
        repetition_index = whitespace.start()
    else:
        logger.debug("No whitespace found, so creating suffix repetition section at the end.")
        content = RawTemplateSection.from_text(text, content_start, section_end)
        trailing = None
        repetition_index = section_end

    repetition = RepetitionTemplateSection(
        content=section.suffix,
        index=repetition_index,
        repetition_type=RepetitionType.SUFFIX,
        repetition_style=section.suffix_style,
        repetition_action=section.suffix_action,
    )
    return content, repetition, trailing
