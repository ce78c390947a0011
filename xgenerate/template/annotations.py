"""Annotations recognised in (or configured for) a raw template.

A front end scans a raw template and produces a list of annotations ordered
by ``begin_index``. Offsets are 0-based character positions into the raw
template text. Three kinds exist:

- CommentAnnotation: a comment marker; becomes a CommentTemplateSection.
- SectionAnnotation: a section declaration carrying the end detection and
  repetition settings. It has no text footprint of its own unless it was
  written in the template itself.
- SectionBoundsAnnotation: a section declaration paired with the offset where
  the section begins; the end offset is resolved while building the tree.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union

from xgenerate.models.enums import RepetitionAction, RepetitionStyle


@dataclass(frozen=True)
class CommentAnnotation:
    """A comment found in the template."""

    annotation_name: ClassVar[str] = "Comment"

    begin_index: int
    end_index: int
    comment: str

    @property
    def is_defined_in_template(self) -> bool:
        return True


@dataclass(frozen=True)
class SectionAnnotation:
    """Declaration of a section and how its end is detected.

    End detection is checked in this order: ``end`` (explicit end marker),
    ``literal_on_last_line``, then ``nr_of_lines``.
    """

    annotation_name: ClassVar[str] = "Section"

    name: str
    begin: str | None = None
    literal_on_first_line: str | None = None
    end: str | None = None
    include_end: bool = False
    literal_on_last_line: str | None = None
    nr_of_lines: int = 1
    prefix: str | None = None
    prefix_style: RepetitionStyle = RepetitionStyle.ALL_BUT_FIRST
    prefix_action: RepetitionAction = RepetitionAction.ADD
    suffix: str | None = None
    suffix_style: RepetitionStyle = RepetitionStyle.ALL_BUT_LAST
    suffix_action: RepetitionAction = RepetitionAction.ADD
    is_defined_in_template: bool = False
    begin_index: int = 0
    end_index: int = 0

    @property
    def has_prefix(self) -> bool:
        return bool(self.prefix)

    @property
    def has_suffix(self) -> bool:
        return bool(self.suffix)


@dataclass
class SectionBoundsAnnotation:
    """A section declaration located in the template.

    ``end_index`` stays None until the sectionizer discovers where the
    section ends.
    """

    annotation_name: ClassVar[str] = "SectionBounds"

    section: SectionAnnotation
    begin_index: int
    end_index: int | None = None

    @property
    def name(self) -> str:
        return self.section.name

    @property
    def is_defined_in_template(self) -> bool:
        return True


TemplateAnnotation = Union[CommentAnnotation, SectionAnnotation, SectionBoundsAnnotation]
