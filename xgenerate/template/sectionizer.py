"""Turn a flat, ordered annotation stream into a tree of template sections.

Section boundaries aren't delimited pairs: only the begin of a section is
known up front. The end is discovered lazily, one gap between annotations at
a time, using the section's end detection policy. A section that closes
before the next annotation hands that annotation back to its parent through
the cursor's pushback.

Example usage:
    sectionizer = TemplateSectionizer()
    sectioned_template = sectionizer.sectionize(preprocessed_template, "Table")
"""

from __future__ import annotations

import dataclasses
import logging

from xgenerate.exceptions import UnhandledAnnotationError, UnterminatedSectionError
from xgenerate.template.annotations import (
    CommentAnnotation,
    SectionAnnotation,
    SectionBoundsAnnotation,
    TemplateAnnotation,
)
from xgenerate.template.cursor import AnnotationCursor
from xgenerate.template.raw_template import PreprocessedTemplate
from xgenerate.template.repetition import split_prefix, split_suffix
from xgenerate.template.section_end import find_section_end
from xgenerate.template.sections import (
    CommentTemplateSection,
    NamedTemplateSection,
    RawTemplateSection,
    SectionedTemplate,
)

logger = logging.getLogger(__name__)


def _copy_annotation(annotation: TemplateAnnotation) -> TemplateAnnotation:
    """Copy the mutable bounds so one build never leaks into the next."""
    if isinstance(annotation, SectionBoundsAnnotation):
        return dataclasses.replace(annotation)
    return annotation


class TemplateSectionizer:
    """Builds the section tree for one preprocessed template.

    The sectionizer holds no state between calls; all state of a build lives
    in the cursor and the tree passed down the recursion.
    """

    def sectionize(
        self, preprocessed_template: PreprocessedTemplate, root_section_name: str
    ) -> SectionedTemplate:
        """Sectionize a preprocessed template.

        Args:
            preprocessed_template: The template text with its annotations,
                ordered by begin offset.
            root_section_name: Name of the implicit section spanning the
                whole template.

        Returns:
            The root of the section tree.

        Raises:
            UnterminatedSectionError: If the end of a section can't be found.
            UnhandledAnnotationError: If the stream holds an unknown annotation.
        """
        text = preprocessed_template.preprocessed_raw_template
        root_end_index = len(text)

        sectioned_template = SectionedTemplate.create(
            root_section_name,
            root_end_index,
            template_name=preprocessed_template.raw_template.file_name,
        )
        root_bounds = SectionBoundsAnnotation(
            section=sectioned_template.section_annotation,
            begin_index=0,
            end_index=root_end_index,
        )
        cursor = AnnotationCursor(
            _copy_annotation(a) for a in preprocessed_template.template_annotations
        )

        self.build_section(root_bounds, sectioned_template, text, cursor, 0, is_root=True)
        return sectioned_template

    def build_section(
        self,
        parent_bounds: SectionBoundsAnnotation,
        parent_section: NamedTemplateSection,
        text: str,
        cursor: AnnotationCursor,
        search_start: int,
        is_root: bool = False,
    ) -> int:
        """Fill ``parent_section`` with its children and return its end offset.

        Consumes annotations from the shared cursor, recursing into nested
        sections. When the end of a non-root section is found before the next
        annotation, that annotation is pushed back for the caller to handle.
        """
        logger.debug(
            f"build_section called for section '{parent_section.name}', "
            f"search_start={search_start}"
        )
        section = parent_bounds.section

        if section.has_prefix:
            logger.info(
                f"Prefix is defined for section '{parent_section.name}', "
                "searching for whitespace and creating appropriate sections."
            )
            # The indentation may not run into the next annotation.
            next_annotation = cursor.next()
            if next_annotation is not None:
                prefix_limit = max(next_annotation.begin_index, search_start)
                cursor.pushback()
            else:
                prefix_limit = len(text)
            whitespace, repetition = split_prefix(section, text, search_start, prefix_limit)
            if whitespace is not None:
                parent_section.add_section(whitespace)
                search_start = whitespace.end_index
            parent_section.add_section(repetition)

        text_length = len(text)
        while search_start < text_length:
            annotation = cursor.next()
            next_begin = annotation.begin_index if annotation is not None else text_length

            # Raw text between the previous position and the next annotation.
            if next_begin > search_start:
                section_end = parent_bounds.end_index
                end_found_here = False

                if section_end is None:
                    logger.info(
                        f"Searching for section end index for '{parent_section.name}' "
                        f"between index {search_start} and {next_begin}"
                    )
                    section_end = find_section_end(parent_bounds, text, search_start, next_begin)
                    if section_end is not None:
                        parent_bounds.end_index = section_end
                        parent_section.end_index = section_end
                        end_found_here = True
                        logger.info(
                            f"Successfully found begin and end position of section "
                            f"({parent_section.name} -> "
                            f"{parent_section.begin_index}:{section_end})"
                        )

                if section_end is not None and section_end <= next_begin:
                    if section_end > search_start:
                        if end_found_here:
                            self._add_closing_content(
                                parent_section, section, text, search_start, section_end
                            )
                        else:
                            self._add_raw_section(parent_section, text, search_start, section_end)
                    # The parent handles the annotation after this section.
                    if annotation is not None:
                        cursor.pushback()
                    return section_end

                self._add_raw_section(parent_section, text, search_start, next_begin)
                search_start = next_begin
                if annotation is None:
                    break

            if isinstance(annotation, CommentAnnotation):
                parent_section.add_section(
                    CommentTemplateSection(
                        comment=annotation.comment,
                        begin_index=annotation.begin_index,
                        end_index=annotation.end_index,
                    )
                )
                logger.info(
                    f"Added CommentTemplateSection to '{parent_section.name}' "
                    f"({annotation.begin_index}:{annotation.end_index})"
                )
                search_start = annotation.end_index

            elif isinstance(annotation, SectionAnnotation):
                # A declaration has no output of its own. Only one written in
                # the template occupies text that has to be skipped.
                if annotation.is_defined_in_template:
                    search_start = annotation.end_index

            elif isinstance(annotation, SectionBoundsAnnotation):
                logger.info(f"Start of processing NamedTemplateSection {annotation.name}")
                named_section = NamedTemplateSection(
                    name=annotation.name,
                    begin_index=annotation.begin_index,
                    section_annotation=annotation.section,
                    end_index=annotation.end_index,
                )
                search_start = self.build_section(
                    annotation, named_section, text, cursor, search_start
                )
                parent_section.add_section(named_section)
                logger.info(
                    f"Added NamedTemplateSection to '{parent_section.name}' "
                    f"({named_section.name} -> "
                    f"{named_section.begin_index}:{named_section.end_index})"
                )

            else:
                raise UnhandledAnnotationError(annotation.annotation_name, annotation.begin_index)

        if is_root:
            return parent_bounds.end_index

        raise UnterminatedSectionError(parent_section.name, parent_section.begin_index)

    def _add_raw_section(
        self, parent_section: NamedTemplateSection, text: str, begin_index: int, end_index: int
    ) -> None:
        raw_section = RawTemplateSection.from_text(text, begin_index, end_index)
        logger.debug(
            f"Found a raw template section in section '{parent_section.name}' "
            f"between index {begin_index} and {end_index}: {raw_section.content!r}"
        )
        parent_section.add_section(raw_section)

    def _add_closing_content(
        self,
        parent_section: NamedTemplateSection,
        section: SectionAnnotation,
        text: str,
        content_start: int,
        section_end: int,
    ) -> None:
        """Add the last content of a section, splitting off its suffix."""
        if section.has_suffix:
            logger.info(
                f"Suffix is defined for section '{parent_section.name}', "
                "searching for whitespace and creating appropriate sections."
            )
        content, repetition, trailing = split_suffix(section, text, content_start, section_end)
        parent_section.add_section(content)
        if repetition is not None:
            parent_section.add_section(repetition)
        if trailing is not None:
            parent_section.add_section(trailing)


def sectionize_template(
    preprocessed_template: PreprocessedTemplate, root_section_name: str
) -> SectionedTemplate:
    """Sectionize a preprocessed template (see TemplateSectionizer.sectionize)."""
    return TemplateSectionizer().sectionize(preprocessed_template, root_section_name)
