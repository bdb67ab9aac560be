import argparse
import asyncio
import sys
from typing import List, Optional

import httpx

from menu_publisher.core.config import settings
from menu_publisher.core.logging import get_logger, setup_logging
from menu_publisher.services.factory import build_dependencies
from menu_publisher.services.pipeline import PipelineDeps, run_pipeline

logger = get_logger("menu_publisher")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="menu-publisher",
        description="Publish today's cafeteria menu with a generated image to Slack",
    )
    parser.add_argument("--url", default=None, help=f"Menu page (default: {settings.MENU_URL})")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL, help="Logging level (default: %(default)s)")
    return parser.parse_args(argv)


def run(deps: PipelineDeps) -> int:
    """Run the pipeline once and map the outcome to a process exit code."""
    logger.info("I'm starting, hold on!")
    try:
        report = asyncio.run(run_pipeline(deps))
    except Exception as e:
        logger.exception("Error: %s", e)
        return 1
    logger.info("I'm done, bye! (menu source: %s, delivered: %s)", report.source, report.notification.delivered)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)

    with httpx.Client(timeout=settings.REQUEST_TIMEOUT, follow_redirects=True) as http_client:
        try:
            deps = build_dependencies(settings, http_client, url=args.url)
        except Exception as e:
            logger.error("Configuration error: %s", e)
            return 1
        return run(deps)


if __name__ == "__main__":
    sys.exit(main())
