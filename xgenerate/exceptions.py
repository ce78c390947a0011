"""
Exception hierarchy for xgenerate.

All custom exceptions inherit from XGenerateError so callers can catch a
single type around a generation step.
"""

from typing import Any


class XGenerateError(Exception):
    """Base exception for all xgenerate errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        self.message = message
        self.context = context or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.context:
            return f"{self.message} | Context: {self.context}"
        return self.message


# Configuration Errors
class ConfigError(XGenerateError):
    """Invalid or unreadable XGenConfig."""

    pass


# Front-end Errors
class TemplatePreprocessorError(XGenerateError):
    """A raw template could not be turned into an annotation stream."""

    pass


# Sectionizer Errors
class SectionizerError(XGenerateError):
    """The annotation stream could not be turned into a section tree."""

    pass


class UnterminatedSectionError(SectionizerError):
    """The end of a named section could not be located."""

    def __init__(self, section_name: str, offset: int | None = None):
        self.section_name = section_name
        self.offset = offset
        context: dict[str, Any] = {"section": section_name}
        if offset is not None:
            context["offset"] = offset
        super().__init__(f"The end of section '{section_name}' can't be found", context)


class UnhandledAnnotationError(SectionizerError):
    """An annotation of a kind the sectionizer doesn't know was encountered."""

    def __init__(self, annotation_name: str, offset: int | None = None):
        self.annotation_name = annotation_name
        context: dict[str, Any] = {}
        if offset is not None:
            context["offset"] = offset
        super().__init__(f"Unhandled annotation found: {annotation_name}", context)


class InvalidRootBindingError(SectionizerError):
    """Zero or several section model bindings match the root section."""

    def __init__(self, root_section_name: str, binding_count: int):
        self.root_section_name = root_section_name
        self.binding_count = binding_count
        super().__init__(
            "There must and can only be 1 section model binding for the root section",
            {"section": root_section_name, "bindings": binding_count},
        )


class CursorMisuseError(SectionizerError):
    """The annotation cursor was pushed back without a preceding next()."""

    pass
