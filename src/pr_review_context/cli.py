"""
Command-line entry point.

Usage:
    pr-review-context --pr 1234 [--config config.yaml]
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .api import generate_review_context
from .config import AppConfig, ConfigManager
from .exceptions import ContextAssemblyError
from .models.context import PipelineStage


logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pr-review-context",
        description="Generates context for AI code review from Azure DevOps PRs and linked Jira issues.",
    )
    parser.add_argument("--pr", type=int, required=True, help="The Azure DevOps Pull Request ID")
    parser.add_argument("--config", default=None, help="Path to YAML config file (default: environment)")
    parser.add_argument("--output-dir", default=None, help="Override the output directory")
    parser.add_argument(
        "--include-unchanged",
        action="store_true",
        help="Include unchanged lines in the diff block",
    )
    parser.add_argument("--no-write", action="store_true", help="Print the document instead of writing it")
    parser.add_argument("--log-level", default=None, help="Override the log level")
    return parser.parse_args(argv)


def load_config(args: argparse.Namespace) -> AppConfig:
    """Load configuration and apply command-line overrides."""
    config = AppConfig.from_yaml(args.config) if args.config else AppConfig.from_env()

    if args.output_dir:
        config.review.output_directory = args.output_dir
    if args.include_unchanged:
        config.review.include_unchanged_lines_in_diff = True
    if args.log_level:
        config.logging.level = args.log_level

    return ConfigManager(config).config


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        config = load_config(args)
    except (ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        context = asyncio.run(
            generate_review_context(args.pr, config, write_to_file=not args.no_write)
        )
    except ContextAssemblyError as e:
        logger.debug("Review context generation failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Error: Cancelled", file=sys.stderr)
        return 1

    if args.no_write:
        print(context.generated_markdown)
    else:
        for item in context.skipped_items:
            logger.warning(f"Skipped {item.kind} {item.key}: {item.reason}")
        if context.stage is PipelineStage.PERSISTED:
            print(f"Review markdown written to: {context.output_path}")

    print("Code review context generation complete.", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
