"""Raw template input and the annotated form produced by a front end."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from xgenerate.exceptions import TemplatePreprocessorError
from xgenerate.template.annotations import TemplateAnnotation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawTemplate:
    """Template text plus the name/location used in diagnostics."""

    content: str
    file_name: str
    file_location: str | None = None

    @classmethod
    def from_file(cls, path: Path | str, encoding: str = "utf-8") -> RawTemplate:
        """Read a raw template from disk.

        Line terminators are kept as-is so offsets match the file content.

        Raises:
            TemplatePreprocessorError: If the file can't be read or decoded.
        """
        path = Path(path)
        logger.info(f"Reading raw template: {path}")
        try:
            with path.open(encoding=encoding, newline="") as f:
                content = f.read()
        except OSError as e:
            raise TemplatePreprocessorError(
                f"Couldn't read the template file: {e}", {"template": str(path)}
            ) from e
        except UnicodeDecodeError as e:
            raise TemplatePreprocessorError(
                f"The template file isn't valid {encoding}: {e}",
                {"template": str(path), "offset": e.start},
            ) from e
        return cls(content=content, file_name=path.name, file_location=str(path.parent))


@dataclass
class PreprocessedTemplate:
    """A raw template with its annotations, ordered by begin offset."""

    raw_template: RawTemplate
    preprocessed_raw_template: str
    template_annotations: list[TemplateAnnotation] = field(default_factory=list)
