"""Template sectionizing: from an annotated raw template to a section tree."""

from xgenerate.template.annotations import (
    CommentAnnotation,
    SectionAnnotation,
    SectionBoundsAnnotation,
    TemplateAnnotation,
)
from xgenerate.template.cursor import AnnotationCursor
from xgenerate.template.raw_template import PreprocessedTemplate, RawTemplate
from xgenerate.template.repetition import split_prefix, split_suffix
from xgenerate.template.section_end import find_section_end
from xgenerate.template.sectionizer import TemplateSectionizer, sectionize_template
from xgenerate.template.sections import (
    CommentTemplateSection,
    NamedTemplateSection,
    RawTemplateSection,
    RepetitionTemplateSection,
    SectionedTemplate,
    TemplateSection,
)

__all__ = [
    # Annotations
    "CommentAnnotation",
    "SectionAnnotation",
    "SectionBoundsAnnotation",
    "TemplateAnnotation",
    "AnnotationCursor",
    # Input
    "RawTemplate",
    "PreprocessedTemplate",
    # Sectionizing
    "find_section_end",
    "split_prefix",
    "split_suffix",
    "TemplateSectionizer",
    "sectionize_template",
    # Section tree
    "CommentTemplateSection",
    "NamedTemplateSection",
    "RawTemplateSection",
    "RepetitionTemplateSection",
    "SectionedTemplate",
    "TemplateSection",
    # Preprocessors
    "TemplatePreprocessor",
    "TextTemplatePreprocessor",
    "get_template_preprocessor",
]


# Lazy imports for the preprocessors (they depend on the config schemas,
# which depend on this package)
def __getattr__(name: str):
    if name == "TemplatePreprocessor":
        from xgenerate.template.preprocessor import TemplatePreprocessor

        return TemplatePreprocessor
    elif name == "get_template_preprocessor":
        from xgenerate.template.preprocessor import get_template_preprocessor

        return get_template_preprocessor
    elif name == "TextTemplatePreprocessor":
        from xgenerate.template.text_preprocessor import TextTemplatePreprocessor

        return TextTemplatePreprocessor
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
