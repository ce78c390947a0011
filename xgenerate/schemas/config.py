"""Pydantic schemas for the XGenConfig generation configuration.

An XGenConfig combines the template configuration (root section, file format
and config-declared sections) with the binding configuration that links
sections to the model. It is read from XML:

    <XGenConfig>
      <TextTemplate rootSectionName="Table">
        <FileFormat singleLineCommentPrefix="--" annotationPrefix="@XGen"/>
        <Sections>
          <Section name="Column" literalOnFirstLine="column_name" suffix=","/>
        </Sections>
      </TextTemplate>
      <Binding>
        <SectionModelBinding section="Table" modelXPath="/model/table"/>
      </Binding>
    </XGenConfig>

XML attributes use camelCase; they map onto the snake_case fields through
aliases.
"""

from __future__ import annotations

import logging
from pathlib import Path

from lxml import etree
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from xgenerate.exceptions import ConfigError
from xgenerate.models.enums import RepetitionAction, RepetitionStyle, TemplateType
from xgenerate.template.annotations import SectionAnnotation

logger = logging.getLogger(__name__)

# Template element name -> template type
_TEMPLATE_ELEMENTS: dict[str, TemplateType] = {
    "TextTemplate": TemplateType.TEXT,
    "XmlTemplate": TemplateType.XML,
}

# =============================================================================
# Template Schemas
# =============================================================================


class SectionConfig(BaseModel):
    """A section declaration, from the config or from a template annotation."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="forbid")

    name: str = Field(..., min_length=1, description="Name of the section")
    begin: str | None = Field(default=None, description="Literal the section starts at")
    literal_on_first_line: str | None = Field(
        default=None,
        alias="literalOnFirstLine",
        description="Literal on the line the section starts on",
    )
    end: str | None = Field(default=None, description="Literal marking the section end")
    include_end: bool = Field(
        default=False, alias="includeEnd", description="Whether the end literal is included"
    )
    literal_on_last_line: str | None = Field(
        default=None,
        alias="literalOnLastLine",
        description="Literal on the line the section ends with",
    )
    nr_of_lines: int = Field(
        default=1, ge=1, alias="nrOfLines", description="Number of lines in the section"
    )
    prefix: str | None = None
    prefix_style: RepetitionStyle = Field(
        default=RepetitionStyle.ALL_BUT_FIRST, alias="prefixStyle"
    )
    prefix_action: RepetitionAction = Field(default=RepetitionAction.ADD, alias="prefixAction")
    suffix: str | None = None
    suffix_style: RepetitionStyle = Field(
        default=RepetitionStyle.ALL_BUT_LAST, alias="suffixStyle"
    )
    suffix_action: RepetitionAction = Field(default=RepetitionAction.ADD, alias="suffixAction")

    def to_annotation(
        self,
        begin_index: int = 0,
        end_index: int = 0,
        is_defined_in_template: bool = False,
    ) -> SectionAnnotation:
        """Create the section annotation the sectionizer works with."""
        return SectionAnnotation(
            **self.model_dump(),
            is_defined_in_template=is_defined_in_template,
            begin_index=begin_index,
            end_index=end_index,
        )


class FileFormatConfig(BaseModel):
    """How annotations are written in a text template."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    single_line_comment_prefix: str | None = Field(
        default=None, alias="singleLineCommentPrefix"
    )
    annotation_prefix: str = Field(default="@XGen", min_length=1, alias="annotationPrefix")
    annotation_args_prefix: str = Field(
        default="(", min_length=1, alias="annotationArgsPrefix"
    )
    annotation_args_suffix: str = Field(
        default=")", min_length=1, alias="annotationArgsSuffix"
    )


class TemplateConfig(BaseModel):
    """Template part of the XGenConfig."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    template_type: TemplateType = TemplateType.TEXT
    root_section_name: str = Field(..., min_length=1, alias="rootSectionName")
    file_format: FileFormatConfig = Field(default_factory=FileFormatConfig)
    sections: list[SectionConfig] = Field(default_factory=list)

    def get_section(self, name: str) -> SectionConfig | None:
        """Return the config-declared section with the given name, if any."""
        for section in self.sections:
            if section.name == name:
                return section
        return None


# =============================================================================
# Binding Schemas
# =============================================================================


class SectionModelBindingConfig(BaseModel):
    """Binds a template section to a selection of the model."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    section_name: str = Field(..., min_length=1, alias="section")
    model_xpath: str | None = Field(default=None, alias="modelXPath")
    placeholder_name: str | None = Field(default=None, alias="placeholderName")
    section_model_bindings: list[SectionModelBindingConfig] = Field(
        default_factory=list, alias="sectionModelBindings"
    )


class BindingConfig(BaseModel):
    """Binding part of the XGenConfig."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    section_model_bindings: list[SectionModelBindingConfig] = Field(
        default_factory=list, alias="sectionModelBindings"
    )

    def get_section_model_bindings(self, section_name: str) -> list[SectionModelBindingConfig]:
        """Return the top-level bindings for a section."""
        return [b for b in self.section_model_bindings if b.section_name == section_name]


# =============================================================================
# XGenConfig
# =============================================================================


class XGenConfig(BaseModel):
    """The configuration for one template: template and binding config."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    template_config: TemplateConfig
    binding_config: BindingConfig | None = None

    @classmethod
    def from_string(cls, content: str | bytes, source: str = "<string>") -> XGenConfig:
        """Parse an XGenConfig XML document.

        Args:
            content: The XML document.
            source: Name of the document, used in error messages.

        Raises:
            ConfigError: If the XML is malformed or doesn't describe a valid config.
        """
        logger.info(f"Reading config from {source}")
        if isinstance(content, str):
            content = content.encode("utf-8")

        parser = etree.XMLParser(resolve_entities=False, no_network=True, remove_comments=True)
        try:
            root = etree.fromstring(content, parser)
        except etree.XMLSyntaxError as e:
            raise ConfigError(f"Error in config file: {e}", {"source": source}) from e

        if _local_name(root) != "XGenConfig":
            raise ConfigError(
                f"Unexpected root element '{_local_name(root)}', expected 'XGenConfig'",
                {"source": source},
            )

        try:
            config = cls(
                template_config=_parse_template_config(root, source),
                binding_config=_parse_binding_config(root),
            )
        except ValidationError as e:
            raise ConfigError(f"Error in config file: {e}", {"source": source}) from e

        logger.info(f"Reading config from {source} complete.")
        return config

    @classmethod
    def from_file(cls, path: Path | str) -> XGenConfig:
        """Read an XGenConfig XML file."""
        path = Path(path)
        logger.debug(f"Creating XGenConfig object from '{path}'")
        try:
            content = path.read_bytes()
        except OSError as e:
            raise ConfigError(f"Couldn't read the config file: {e}", {"source": str(path)}) from e
        return cls.from_string(content, source=str(path))


def _local_name(elem: etree._Element) -> str:
    """Element name without its namespace."""
    return etree.QName(elem).localname


def _children(elem: etree._Element, name: str) -> list[etree._Element]:
    return [child for child in elem.iterchildren(etree.Element) if _local_name(child) == name]


def _parse_template_config(root: etree._Element, source: str) -> TemplateConfig:
    template_elems = [
        child for child in root.iterchildren(etree.Element) if _local_name(child) in _TEMPLATE_ELEMENTS
    ]
    if len(template_elems) != 1:
        raise ConfigError(
            "The config must contain exactly one TextTemplate or XmlTemplate element",
            {"source": source, "found": len(template_elems)},
        )
    template_elem = template_elems[0]

    data: dict = dict(template_elem.attrib)
    data["template_type"] = _TEMPLATE_ELEMENTS[_local_name(template_elem)]

    file_formats = _children(template_elem, "FileFormat")
    if file_formats:
        data["file_format"] = FileFormatConfig.model_validate(dict(file_formats[0].attrib))

    data["sections"] = [
        SectionConfig.model_validate(dict(section_elem.attrib))
        for sections_elem in _children(template_elem, "Sections")
        for section_elem in _children(sections_elem, "Section")
    ]
    return TemplateConfig.model_validate(data)


def _parse_binding(elem: etree._Element) -> SectionModelBindingConfig:
    data: dict = dict(elem.attrib)
    data["section_model_bindings"] = [
        _parse_binding(child) for child in _children(elem, "SectionModelBinding")
    ]
    return SectionModelBindingConfig.model_validate(data)


def _parse_binding_config(root: etree._Element) -> BindingConfig | None:
    binding_elems = _children(root, "Binding")
    if not binding_elems:
        return None
    return BindingConfig(
        section_model_bindings=[
            _parse_binding(elem)
            for binding_elem in binding_elems
            for elem in _children(binding_elem, "SectionModelBinding")
        ]
    )
