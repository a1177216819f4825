# src/device_faker_templates/cli.py

import argparse
import asyncio
import importlib.metadata
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from device_faker_templates import log_utils, service
from device_faker_templates.config import Settings, load_settings
from device_faker_templates.constants import APP_NAME
from device_faker_templates.exceptions import ConfigurationError
from device_faker_templates.models import Category


def _category_arg(value: str) -> Category:
    try:
        return Category.parse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Discover and download online Device Faker templates",
    )
    parser.add_argument("--config", help="Path to an alternative config.yaml")
    parser.add_argument(
        "--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)"
    )
    subparsers = parser.add_subparsers(dest="command")

    brands_parser = subparsers.add_parser("brands", help="List known brands")
    brands_parser.add_argument(
        "--category", type=_category_arg, help="Only list brands of this category"
    )
    brands_parser.add_argument(
        "--by-category",
        action="store_true",
        help="Group brands under each category",
    )

    for name, help_text in (
        ("list", "List online templates"),
        ("download", "Download and parse online templates"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument(
            "--category",
            dest="categories",
            action="append",
            type=_category_arg,
            help="Restrict to a category (can be passed multiple times)",
        )
        sub.add_argument("--brand", help="Restrict to templates of this brand")
        if name == "download":
            sub.add_argument(
                "--output", "-o", help="Write downloaded templates to this YAML file"
            )

    subparsers.add_parser("version", help="Display the installed version")
    return parser


def _configure_logging(settings: Settings, cli_level: Optional[str]) -> None:
    level = cli_level or settings.log_level
    if level:
        log_utils.set_log_level(level)
    if settings.log_dir:
        log_utils.add_file_logging(Path(settings.log_dir), level or "INFO")


def run_brands(
    settings: Settings, category: Optional[Category], by_category: bool = False
) -> int:
    if by_category and category is None:
        grouped = asyncio.run(service.fetch_brands_by_category(settings))
        for cat, names in grouped.items():
            log_utils.logger.info(f"{cat.value}: {', '.join(names) or '-'}")
        return 0

    brands = asyncio.run(service.fetch_brands(settings, category))
    if not brands:
        log_utils.logger.info("No brands found.")
        return 0
    for brand in brands:
        log_utils.logger.info(brand)
    return 0


def run_list(
    settings: Settings, categories: Optional[List[Category]], brand: Optional[str]
) -> int:
    templates = asyncio.run(service.find_templates(settings, categories, brand))
    if not templates:
        log_utils.logger.info("No templates found.")
        return 0
    for template in sorted(templates, key=lambda t: (t.category.value, t.path)):
        brand_label = f" [{template.brand}]" if template.brand else ""
        log_utils.logger.info(
            f"{template.category.value}{brand_label}: {template.display_name} ({template.path})"
        )
    log_utils.logger.info(f"{len(templates)} templates")
    return 0


def run_download(
    settings: Settings,
    categories: Optional[List[Category]],
    brand: Optional[str],
    output: Optional[str],
) -> int:
    async def _run():
        references = await service.find_templates(settings, categories, brand)
        return references, await service.download_templates(references, settings)

    references, downloaded = asyncio.run(_run())
    log_utils.logger.info(
        f"Downloaded {len(downloaded)} of {len(references)} discovered templates"
    )
    if output:
        with open(output, "w", encoding="utf-8") as f:
            yaml.safe_dump(
                [t.to_dict() for t in downloaded],
                f,
                allow_unicode=True,
                sort_keys=False,
            )
        log_utils.logger.info(f"Wrote {output}")
    return 0 if downloaded or not references else 1


def main(argv: Optional[List[str]] = None) -> int:
    """
    Entry point for the command-line interface.

    Loads settings, configures logging and dispatches the `brands`, `list`,
    `download` and `version` subcommands. Returns the process exit status.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "version":
        try:
            version = importlib.metadata.version(APP_NAME)
        except importlib.metadata.PackageNotFoundError:
            version = "unknown"
        log_utils.logger.info(f"{APP_NAME} {version}")
        return 0

    if args.command is None:
        parser.print_help()
        return 0

    try:
        settings = load_settings(args.config)
    except ConfigurationError as e:
        log_utils.logger.error(f"Invalid configuration: {e}")
        return 2

    _configure_logging(settings, args.log_level)

    if args.command == "brands":
        return run_brands(settings, args.category, args.by_category)
    if args.command == "list":
        return run_list(settings, args.categories, args.brand)
    return run_download(settings, args.categories, args.brand, args.output)


if __name__ == "__main__":
    sys.exit(main())
