#!/usr/bin/env python3
"""Command-line runner for image analysis.

Usage:
    image-analysis --image-url https://example.com/cat.jpg
    python -m image_analysis.cli --image-url URL --strategy per_label
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from .errors import ImageAnalysisError
from .handler import AnalysisResult, create_handler
from .services.translation_service import STRATEGIES
from .utils import Config, setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Detect image labels and list them translated to Portuguese."
    )
    parser.add_argument(
        "--image-url",
        "-u",
        required=True,
        help="URL of the image to analyze",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to configuration file",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail when translations and labels differ in count",
    )
    parser.add_argument(
        "--strategy",
        choices=STRATEGIES,
        default=None,
        help="Translation strategy (default: from config)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: from config)",
    )
    return parser


async def run(
    config: Config,
    image_url: str,
    strict: bool = False,
    strategy: Optional[str] = None,
) -> AnalysisResult:
    """Analyze one image with handler settings overridden from the CLI."""
    handler = create_handler(config)
    if strict:
        handler.strict_alignment = True
    if strategy:
        handler.translation_service.strategy = strategy

    try:
        return await handler.analyze(image_url)
    finally:
        await handler.close()


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = Config(args.config)
    setup_logging(
        level=args.log_level or config.log_level,
        log_file=config.log_file,
    )

    try:
        result = asyncio.run(
            run(config, args.image_url, strict=args.strict, strategy=args.strategy)
        )
    except ImageAnalysisError as e:
        logger.error(f"Analysis failed during {e.stage or 'setup'}: {e}")
        return 1

    print(result.body)
    return 0


if __name__ == "__main__":
    sys.exit(main())
