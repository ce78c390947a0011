"""Pydantic schemas for the generation configuration."""

from xgenerate.schemas.config import (
    BindingConfig,
    FileFormatConfig,
    SectionConfig,
    SectionModelBindingConfig,
    TemplateConfig,
    XGenConfig,
)

__all__ = [
    "BindingConfig",
    "FileFormatConfig",
    "SectionConfig",
    "SectionModelBindingConfig",
    "TemplateConfig",
    "XGenConfig",
]
