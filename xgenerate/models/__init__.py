"""Shared enumerations."""

from xgenerate.models.enums import (
    GenerationStatus,
    RepetitionAction,
    RepetitionStyle,
    RepetitionType,
    TemplateType,
)

__all__ = [
    "GenerationStatus",
    "RepetitionAction",
    "RepetitionStyle",
    "RepetitionType",
    "TemplateType",
]
