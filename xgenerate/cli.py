"""CLI for sectionizing templates."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from xgenerate.config import Settings, get_settings
from xgenerate.exceptions import XGenerateError
from xgenerate.generator import Generator, TemplateConfigCombination
from xgenerate.template.sections import NamedTemplateSection, TemplateSection

LOG_FORMAT = "%(levelname)-5.5s [%(name)s] %(message)s"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

logger = logging.getLogger(__name__)


def configure_logging(
    log_level: str = "INFO",
    log_file: Path | None = None,
    file_log_level: str | None = None,
) -> None:
    """Configure console logging and, optionally, a log file.

    Args:
        log_level: Level of the console handler.
        log_file: File to additionally log to.
        file_log_level: Level of the file handler (defaults to ``log_level``).
    """
    logging.basicConfig(level=log_level, format=LOG_FORMAT, force=True)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(file_log_level or log_level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger = logging.getLogger()
        root_logger.addHandler(file_handler)
        # The root level caps every handler, so lower it for a chattier file.
        root_logger.setLevel(min(root_logger.level, file_handler.level))
        for handler in root_logger.handlers:
            if handler is not file_handler:
                handler.setLevel(log_level)


def format_outline(section: TemplateSection, indent: int = 0) -> list[str]:
    """Render a section (sub)tree as indented outline lines."""
    pad = "  " * indent
    if isinstance(section, NamedTemplateSection):
        lines = [
            f"{pad}[{section.section_type}] {section.name} "
            f"({section.begin_index}:{section.end_index})"
        ]
        for child in section.template_sections:
            lines.extend(format_outline(child, indent + 1))
        return lines

    detail = getattr(section, "content", None)
    if detail is None:
        detail = getattr(section, "comment", "")
    return [
        f"{pad}[{section.section_type}] ({section.begin_index}:{section.end_index}) {detail!r}"
    ]


def sectionize_command(template: Path, config: Path, as_json: bool = False) -> int:
    """Sectionize a single template and print the result.

    Args:
        template: Path to the raw template.
        config: Path to the XGenConfig file.
        as_json: Print the section tree as JSON instead of an outline.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    generator = Generator(get_settings())
    try:
        sectioned_template = generator.sectionize(template, config)
    except XGenerateError as e:
        logger.error(f"Sectionizing '{template}' failed: {e}")
        return 1

    if as_json:
        print(json.dumps(sectioned_template.to_dict(), indent=2))
    else:
        print("\n".join(format_outline(sectioned_template)))
    return 0


def generate_command(
    combinations: list[str],
    settings: Settings,
    fail_fast: bool = False,
) -> int:
    """Sectionize a batch of template/config combinations and write the results.

    Args:
        combinations: ``"template::config"`` strings.
        settings: Settings holding the folders and worker count.
        fail_fast: Stop at the first failed step.

    Returns:
        Exit code (0 when every step succeeded, 1 otherwise).
    """
    try:
        parsed = [TemplateConfigCombination.from_string(c) for c in combinations]
    except ValueError as e:
        logger.error(str(e))
        return 1

    generator = Generator(settings)
    results = generator.run(parsed, fail_fast=fail_fast)

    failed = 0
    for result in results:
        if result.succeeded:
            output_path = generator.write_result(result)
            print(f"  [{result.status.value:<5}] {result.template_file_name} -> {output_path}")
        else:
            failed += 1
            print(f"  [{result.status.value:<5}] {result.template_file_name}: {result.error}")

    skipped = len(parsed) - len(results)
    print()
    print(f"Processed {len(results)} of {len(parsed)} combinations, {failed} failed")
    if skipped:
        print(f"  {skipped} skipped after the first failure")

    return 1 if failed or skipped else 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(description="Model-driven code generator CLI")
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        type=str.upper,
        default=None,
        help="Console log level (default: XGEN_LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Also write the log to this file",
    )
    parser.add_argument(
        "--file-log-level",
        choices=LOG_LEVELS,
        type=str.upper,
        help="Log level of the log file (requires --log-file)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Shortcut for --log-level DEBUG",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Sectionize command
    sectionize_parser = subparsers.add_parser(
        "sectionize", help="Sectionize one template and print its section tree"
    )
    sectionize_parser.add_argument(
        "template",
        type=Path,
        help="Path to the raw template",
    )
    sectionize_parser.add_argument(
        "--config",
        type=Path,
        required=True,
        help="Path to the XGenConfig file",
    )
    sectionize_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the section tree as JSON",
    )

    # Generate command
    generate_parser = subparsers.add_parser(
        "generate", help="Sectionize template/config combinations and write the results"
    )
    generate_parser.add_argument(
        "--mtc",
        action="append",
        required=True,
        metavar="TEMPLATE::CONFIG",
        help="Template and config file locations (repeatable)",
    )
    generate_parser.add_argument(
        "--template-folder",
        type=Path,
        help="Folder the template locations are relative to",
    )
    generate_parser.add_argument(
        "--config-folder",
        type=Path,
        help="Folder the config locations are relative to",
    )
    generate_parser.add_argument(
        "--output-folder",
        type=Path,
        help="Folder the section trees are written to",
    )
    generate_parser.add_argument(
        "--workers",
        type=int,
        help="Number of combinations processed in parallel",
    )
    generate_parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Stop at the first failed combination",
    )

    args = parser.parse_args(argv)

    if args.file_log_level and args.log_file is None:
        parser.error("--file-log-level requires --log-file")

    settings = get_settings()
    log_level = "DEBUG" if args.debug or settings.debug else args.log_level or settings.log_level
    configure_logging(log_level, args.log_file, args.file_log_level)

    if args.command == "sectionize":
        return sectionize_command(args.template, args.config, as_json=args.json)

    elif args.command == "generate":
        if args.workers is not None and args.workers < 1:
            parser.error("--workers must be at least 1")
        overrides = {
            "template_folder": args.template_folder,
            "config_folder": args.config_folder,
            "output_folder": args.output_folder,
            "max_workers": args.workers,
        }
        settings = settings.model_copy(
            update={key: value for key, value in overrides.items() if value is not None}
        )
        return generate_command(args.mtc, settings, fail_fast=args.fail_fast)

    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
