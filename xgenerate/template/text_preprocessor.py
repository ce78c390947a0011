"""Front end for plain-text templates.

Annotations are written inline, usually on a line of their own behind the
single-line comment prefix of the target language:

    -- @XGenComment(Columns of the table)
    -- @XGenSection(name="Column" suffix=",")
    column_name varchar(100)

The template text is never modified. An annotation alone on its line covers
that whole line, so the builder skips it; otherwise it covers only its own
text.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator

from pydantic import ValidationError

from xgenerate.exceptions import TemplatePreprocessorError
from xgenerate.schemas.config import FileFormatConfig, SectionConfig, TemplateConfig
from xgenerate.template.annotations import (
    CommentAnnotation,
    SectionBoundsAnnotation,
    TemplateAnnotation,
)
from xgenerate.template.preprocessor import TemplatePreprocessor
from xgenerate.template.raw_template import PreprocessedTemplate, RawTemplate

logger = logging.getLogger(__name__)

# key="value" pairs inside the annotation arguments
_ARGUMENT_PATTERN = re.compile(r'([A-Za-z_]\w*)\s*=\s*"([^"]*)"')


def build_annotation_pattern(file_format: FileFormatConfig) -> re.Pattern:
    """Compile the pattern matching ``<prefix><Name><(>args<)>`` on one line."""
    return re.compile(
        rf"{re.escape(file_format.annotation_prefix)}(?P<name>[A-Za-z]+)\s*"
        rf"{re.escape(file_format.annotation_args_prefix)}"
        r'(?P<args>(?:"[^"\n]*"|[^"\n])*?)'
        rf"{re.escape(file_format.annotation_args_suffix)}"
    )


def parse_annotation_arguments(args: str) -> dict[str, str]:
    """Parse ``name="Column" suffix=","`` into a dict.

    Raises:
        TemplatePreprocessorError: If anything besides key="value" pairs
            (separated by whitespace or commas) is present.
    """
    leftover = _ARGUMENT_PATTERN.sub("", args).replace(",", "").strip()
    if leftover:
        raise TemplatePreprocessorError(
            f"Malformed annotation arguments: {args!r}", {"unparsed": leftover}
        )
    return {key: value for key, value in _ARGUMENT_PATTERN.findall(args)}


def _line_bounds(text: str, begin_index: int, end_index: int) -> tuple[int, int]:
    """Start of the line holding ``begin_index`` and end (past the newline) of
    the line holding ``end_index``."""
    line_start = text.rfind("\n", 0, begin_index) + 1
    line_end = text.find("\n", end_index)
    line_end = len(text) if line_end == -1 else line_end + 1
    return line_start, line_end


class TextTemplatePreprocessor(TemplatePreprocessor):
    """Collects the annotations of a plain-text template."""

    def get_preprocessed_template(self, raw_template: RawTemplate) -> PreprocessedTemplate:
        template_config = self.config.template_config
        text = raw_template.content

        annotations: list[TemplateAnnotation] = list(
            self._collect_inline_annotations(text, template_config)
        )
        footprints = [
            (a.begin_index, a.end_index)
            for a in annotations
            if not isinstance(a, SectionBoundsAnnotation)
        ]
        annotations.extend(self._collect_configured_sections(text, template_config, footprints))
        # Declarations without a footprint go first so they never sit between
        # a section start and the annotation following it.
        annotations.sort(key=lambda a: (a.begin_index, a.is_defined_in_template))

        logger.info(
            f"Found {len(annotations)} annotations in template '{raw_template.file_name}'"
        )
        return PreprocessedTemplate(
            raw_template=raw_template,
            preprocessed_raw_template=text,
            template_annotations=annotations,
        )

    # =========================================================================
    # Inline annotations
    # =========================================================================

    def _collect_inline_annotations(
        self, text: str, template_config: TemplateConfig
    ) -> Iterator[TemplateAnnotation]:
        file_format = template_config.file_format
        pattern = build_annotation_pattern(file_format)

        for match in pattern.finditer(text):
            begin_index, end_index = self._annotation_footprint(text, match, file_format)
            name = match.group("name")
            args = match.group("args")
            logger.debug(f"Found annotation '{name}' at {begin_index}:{end_index}")

            if name == "Comment":
                yield CommentAnnotation(
                    begin_index=begin_index, end_index=end_index, comment=args.strip()
                )
            elif name == "Section":
                section = self._section_from_arguments(args, template_config, match.start())
                annotation = section.to_annotation(
                    begin_index=begin_index,
                    end_index=end_index,
                    is_defined_in_template=True,
                )
                yield annotation
                # The section starts right after the annotation.
                yield SectionBoundsAnnotation(section=annotation, begin_index=end_index)
            else:
                raise TemplatePreprocessorError(
                    f"Unknown annotation found: {name}", {"offset": match.start()}
                )

    def _annotation_footprint(
        self, text: str, match: re.Match, file_format: FileFormatConfig
    ) -> tuple[int, int]:
        """Text range claimed by an annotation.

        An annotation alone on its line (optionally behind the single-line
        comment prefix) claims the whole line including the line terminator.
        """
        line_start, line_end = _line_bounds(text, match.start(), match.end())
        before = text[line_start : match.start()].strip()
        after = text[match.end() : line_end].strip()

        own_line_prefixes = {""}
        if file_format.single_line_comment_prefix:
            own_line_prefixes.add(file_format.single_line_comment_prefix.strip())

        if before in own_line_prefixes and not after:
            return line_start, line_end
        return match.start(), match.end()

    def _section_from_arguments(
        self, args: str, template_config: TemplateConfig, offset: int
    ) -> SectionConfig:
        """Build a section declaration, using a config section of the same
        name for the values the annotation doesn't set."""
        arguments = parse_annotation_arguments(args)

        values: dict[str, object] = {}
        configured = template_config.get_section(arguments.get("name", ""))
        if configured is not None:
            values.update(configured.model_dump(by_alias=True, exclude_unset=True))
        values.update(arguments)

        try:
            return SectionConfig.model_validate(values)
        except ValidationError as e:
            raise TemplatePreprocessorError(
                f"Invalid section annotation: {e}", {"offset": offset}
            ) from e

    # =========================================================================
    # Config-declared sections
    # =========================================================================

    def _collect_configured_sections(
        self,
        text: str,
        template_config: TemplateConfig,
        footprints: list[tuple[int, int]],
    ) -> Iterator[TemplateAnnotation]:
        """Declarations and bounds for the config-declared sections.

        Begin literals inside the text of an inline annotation (for example a
        commented-out occurrence in an ``@XGenComment``) are ignored.
        """
        for section_config in template_config.sections:
            annotation = section_config.to_annotation()
            yield annotation
            for begin_index in self._find_section_begins(text, section_config):
                if any(begin <= begin_index < end for begin, end in footprints):
                    logger.debug(
                        f"Ignoring begin of config section '{section_config.name}' "
                        f"at {begin_index}, it lies inside an annotation"
                    )
                    continue
                logger.debug(f"Config section '{section_config.name}' begins at {begin_index}")
                yield SectionBoundsAnnotation(section=annotation, begin_index=begin_index)

    def _find_section_begins(self, text: str, section_config: SectionConfig) -> list[int]:
        """Offsets where a config-declared section starts.

        With ``begin`` the section starts at the literal itself, with
        ``literal_on_first_line`` at the start of the line holding it.
        """
        if section_config.begin:
            return [m.start() for m in re.finditer(re.escape(section_config.begin), text)]

        if section_config.literal_on_first_line:
            begins: list[int] = []
            for m in re.finditer(re.escape(section_config.literal_on_first_line), text):
                line_start = text.rfind("\n", 0, m.start()) + 1
                if line_start not in begins:
                    begins.append(line_start)
            return begins

        return []
