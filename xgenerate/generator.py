"""Batch orchestration over template/config combinations.

Each combination is one independent generation step: its raw template,
config, annotations and section tree are private to the step, so steps can
run in parallel and a failing step never affects the others.
"""

from __future__ import annotations

import json
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path

from xgenerate.config import Settings
from xgenerate.exceptions import XGenerateError
from xgenerate.models.enums import GenerationStatus
from xgenerate.schemas.config import XGenConfig
from xgenerate.template.preprocessor import get_template_preprocessor
from xgenerate.template.raw_template import RawTemplate
from xgenerate.template.sections import SectionedTemplate

logger = logging.getLogger(__name__)

COMBINATION_SEPARATOR = "::"


@dataclass(frozen=True)
class TemplateConfigCombination:
    """A template file and the config file to process it with."""

    template_file_location: str
    config_file_location: str

    @classmethod
    def from_string(cls, value: str) -> TemplateConfigCombination:
        """Parse ``"template::config"``.

        Raises:
            ValueError: If the value doesn't consist of two non-empty parts.
        """
        parts = value.split(COMBINATION_SEPARATOR)
        if len(parts) != 2 or not all(p.strip() for p in parts):
            raise ValueError(
                f"Invalid template-config combination '{value}', "
                f"expected 'TemplateFileLocation{COMBINATION_SEPARATOR}ConfigFileLocation'"
            )
        return cls(template_file_location=parts[0].strip(), config_file_location=parts[1].strip())


@dataclass
class GenerationResult:
    """Outcome of one generation step."""

    template_file_name: str
    config_file_name: str
    status: GenerationStatus = GenerationStatus.OK
    sectioned_template: SectionedTemplate | None = None
    error: XGenerateError | None = None

    def set_error(self, error: XGenerateError) -> None:
        self.status = GenerationStatus.ERROR
        self.error = error

    @property
    def succeeded(self) -> bool:
        return self.status == GenerationStatus.OK


class Generator:
    """Sectionizes templates for a batch of template/config combinations.

    Example usage:
        generator = Generator(Settings())
        results = generator.run(
            [TemplateConfigCombination.from_string("table.sql::table.xml")]
        )
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    def sectionize(self, template_path: Path | str, config_path: Path | str) -> SectionedTemplate:
        """Sectionize one template with one config.

        Raises:
            XGenerateError: For any config, front-end or sectionizer failure.
        """
        config = XGenConfig.from_file(config_path)
        raw_template = RawTemplate.from_file(template_path)
        preprocessor = get_template_preprocessor(config)
        return preprocessor.preprocess(raw_template)

    def run_step(self, combination: TemplateConfigCombination) -> GenerationResult:
        """Run one generation step, recording a failure on the result."""
        template_path = self.settings.template_folder / combination.template_file_location
        config_path = self.settings.config_folder / combination.config_file_location

        logger.info("Starting generation step with the following arguments:")
        logger.info(f" - TemplateFileLocation: {template_path}")
        logger.info(f" - ConfigFileLocation: {config_path}")

        result = GenerationResult(
            template_file_name=combination.template_file_location,
            config_file_name=combination.config_file_location,
        )
        try:
            result.sectioned_template = self.sectionize(template_path, config_path)
        except XGenerateError as e:
            logger.error(f"Generation step for '{combination.template_file_location}' failed: {e}")
            result.set_error(e)
        return result

    def run(
        self,
        combinations: list[TemplateConfigCombination],
        fail_fast: bool = False,
        max_workers: int | None = None,
    ) -> list[GenerationResult]:
        """Run all generation steps.

        Args:
            combinations: The template/config combinations to process.
            fail_fast: Stop after the first failed step (sequential runs only;
                parallel steps that already started still finish).
            max_workers: Number of steps run in parallel, defaults to the
                ``max_workers`` setting.

        Returns:
            One result per processed step, in the order of ``combinations``.
        """
        max_workers = max_workers or self.settings.max_workers

        if max_workers <= 1:
            results: list[GenerationResult] = []
            for combination in combinations:
                result = self.run_step(combination)
                results.append(result)
                if fail_fast and not result.succeeded:
                    logger.warning("Stopping generation after the first failed step")
                    break
            return results

        results_by_index: dict[int, GenerationResult] = {}
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            future_to_index = {
                executor.submit(self.run_step, combination): index
                for index, combination in enumerate(combinations)
            }
            for future in as_completed(future_to_index):
                if future.cancelled():
                    continue
                index = future_to_index[future]
                results_by_index[index] = future.result()
                if fail_fast and not results_by_index[index].succeeded:
                    for pending in future_to_index:
                        pending.cancel()
        return [results_by_index[i] for i in sorted(results_by_index)]

    def write_result(self, result: GenerationResult, output_folder: Path | None = None) -> Path:
        """Write the section tree of a successful step as JSON.

        Returns:
            Path of the written file.

        Raises:
            ValueError: If the step has no section tree.
        """
        if result.sectioned_template is None:
            raise ValueError(f"No sectioned template for '{result.template_file_name}'")

        output_folder = output_folder or self.settings.output_folder
        output_path = output_folder / f"{result.template_file_name}.sections.json"
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(result.sectioned_template.to_dict(), f, indent=2)
        logger.info(f"Wrote sectioned template to {output_path}")
        return output_path
