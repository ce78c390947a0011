"""Model-driven code generator: template sectionizing and batch orchestration."""

__version__ = "0.1.0"
