"""Section tree nodes produced by the sectionizer.

The tree is rooted at a SectionedTemplate spanning the whole raw template.
Children of a NamedTemplateSection are ordered and together cover the
parent's range without gaps or overlaps:

- RawTemplateSection: verbatim (escaped) template text.
- CommentTemplateSection: a template comment, emits nothing.
- NamedTemplateSection: a bounded, named section with its own children.
- RepetitionTemplateSection: a zero-width marker where a prefix or suffix
  literal is re-emitted between repeated instances of the parent section.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Union

from xgenerate.models.enums import RepetitionAction, RepetitionStyle, RepetitionType
from xgenerate.template.annotations import SectionAnnotation

if TYPE_CHECKING:
    from xgenerate.schemas.config import SectionModelBindingConfig

# "&name;" entity references, which have to survive the XSLT round trip.
_ENTITY_REFERENCE = re.compile(r"&([a-zA-Z0-9]+;)")
# A bare ampersand that doesn't start an entity reference.
_BARE_AMPERSAND = re.compile(r"&(?![a-zA-Z0-9#]+;)")


def double_entity_encode(text: str) -> str:
    """Turn entity references into escaped literals (``&name;`` -> ``&amp;name;``)."""
    return _ENTITY_REFERENCE.sub(r"&amp;\1", text)


def escape_xml_chars(text: str) -> str:
    """Escape markup characters, leaving existing entity references intact."""
    text = _BARE_AMPERSAND.sub("&amp;", text)
    return text.replace("<", "&lt;").replace(">", "&gt;")


def escape_raw_content(text: str) -> str:
    """Escape a raw template slice for embedding in the generation template."""
    return escape_xml_chars(double_entity_encode(text))


@dataclass(frozen=True)
class RawTemplateSection:
    """A verbatim slice of the raw template."""

    section_type: ClassVar[str] = "raw"

    content: str
    begin_index: int
    end_index: int

    @classmethod
    def from_text(cls, text: str, begin_index: int, end_index: int) -> RawTemplateSection:
        """Create a raw section for ``text[begin_index:end_index]``."""
        return cls(
            content=escape_raw_content(text[begin_index:end_index]),
            begin_index=begin_index,
            end_index=end_index,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.section_type,
            "begin": self.begin_index,
            "end": self.end_index,
            "content": self.content,
        }


@dataclass(frozen=True)
class CommentTemplateSection:
    """A template comment, kept for traceability."""

    section_type: ClassVar[str] = "comment"

    comment: str
    begin_index: int
    end_index: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.section_type,
            "begin": self.begin_index,
            "end": self.end_index,
            "comment": self.comment,
        }


@dataclass(frozen=True)
class RepetitionTemplateSection:
    """A prefix or suffix literal emitted between repeated section instances."""

    section_type: ClassVar[str] = "repetition"

    content: str
    index: int
    repetition_type: RepetitionType
    repetition_style: RepetitionStyle
    repetition_action: RepetitionAction

    @property
    def begin_index(self) -> int:
        return self.index

    @property
    def end_index(self) -> int:
        return self.index

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.section_type,
            "begin": self.index,
            "end": self.index,
            "content": self.content,
            "repetition_type": self.repetition_type.value,
            "repetition_style": self.repetition_style.value,
            "repetition_action": self.repetition_action.value,
        }


@dataclass
class NamedTemplateSection:
    """A named section and its ordered child sections."""

    section_type: ClassVar[str] = "named"

    name: str
    begin_index: int
    section_annotation: SectionAnnotation
    end_index: int | None = None
    template_sections: list[TemplateSection] = field(default_factory=list)

    def add_section(self, template_section: TemplateSection) -> None:
        self.template_sections.append(template_section)

    def iter_sections(self) -> Iterator[TemplateSection]:
        """Yield every descendant section, depth first."""
        for template_section in self.template_sections:
            yield template_section
            if isinstance(template_section, NamedTemplateSection):
                yield from template_section.iter_sections()

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.section_type,
            "name": self.name,
            "begin": self.begin_index,
            "end": self.end_index,
            "sections": [s.to_dict() for s in self.template_sections],
        }


@dataclass
class SectionedTemplate(NamedTemplateSection):
    """Root of a section tree, spanning the complete raw template."""

    section_type: ClassVar[str] = "template"

    template_name: str | None = None
    model_binding: SectionModelBindingConfig | None = None

    @classmethod
    def create(
        cls, root_section_name: str, end_index: int, template_name: str | None = None
    ) -> SectionedTemplate:
        return cls(
            name=root_section_name,
            begin_index=0,
            section_annotation=SectionAnnotation(name=root_section_name),
            end_index=end_index,
            template_name=template_name,
        )

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["template_name"] = self.template_name
        if self.model_binding is not None:
            result["model_binding"] = self.model_binding.model_dump(by_alias=True)
        return result


TemplateSection = Union[
    RawTemplateSection,
    CommentTemplateSection,
    RepetitionTemplateSection,
    NamedTemplateSection,
]
