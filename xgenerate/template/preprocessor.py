"""Template preprocessing: annotate a raw template and sectionize it."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from xgenerate.exceptions import ConfigError, InvalidRootBindingError
from xgenerate.models.enums import TemplateType
from xgenerate.schemas.config import XGenConfig
from xgenerate.template.raw_template import PreprocessedTemplate, RawTemplate
from xgenerate.template.sectionizer import TemplateSectionizer
from xgenerate.template.sections import SectionedTemplate

logger = logging.getLogger(__name__)


class TemplatePreprocessor(ABC):
    """Base class for the format-specific template preprocessors.

    Subclasses turn a raw template into a PreprocessedTemplate (the template
    text plus its ordered annotations); the sectionizing is shared.

    Example usage:
        preprocessor = get_template_preprocessor(config)
        sectioned_template = preprocessor.preprocess(raw_template)
    """

    def __init__(self, config: XGenConfig):
        self.config = config
        self.sectionizer = TemplateSectionizer()

    def preprocess(self, raw_template: RawTemplate) -> SectionedTemplate:
        """Annotate and sectionize a raw template.

        The root section binding is checked before the template is scanned.

        Raises:
            InvalidRootBindingError: If not exactly one binding matches the
                root section.
            TemplatePreprocessorError: If the template can't be annotated.
            SectionizerError: If the annotations can't be sectionized.
        """
        root_section_name = self.config.template_config.root_section_name

        root_bindings = []
        if self.config.binding_config is not None:
            root_bindings = self.config.binding_config.get_section_model_bindings(
                root_section_name
            )
        if len(root_bindings) != 1:
            raise InvalidRootBindingError(root_section_name, len(root_bindings))

        logger.info(f"Preprocessing template '{raw_template.file_name}'")
        preprocessed_template = self.get_preprocessed_template(raw_template)

        sectioned_template = self.sectionizer.sectionize(preprocessed_template, root_section_name)
        sectioned_template.model_binding = root_bindings[0]
        return sectioned_template

    @abstractmethod
    def get_preprocessed_template(self, raw_template: RawTemplate) -> PreprocessedTemplate:
        """Scan the raw template and collect its annotations."""


def get_template_preprocessor(config: XGenConfig) -> TemplatePreprocessor:
    """Return the preprocessor for the template type of the config.

    Raises:
        ConfigError: If no front end exists for the template type.
    """
    template_type = config.template_config.template_type
    if template_type == TemplateType.TEXT:
        from xgenerate.template.text_preprocessor import TextTemplatePreprocessor

        return TextTemplatePreprocessor(config)

    raise ConfigError(
        f"No template preprocessor available for template type '{template_type.value}'",
        {"template_type": template_type.value},
    )
