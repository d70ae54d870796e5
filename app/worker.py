"""
Worker process: one WorkerLoop per event category.

Usage:
    python -m app.worker                    # all categories
    python -m app.worker --category stripe
    python -m app.worker --category mollie
"""

import argparse
import asyncio
import logging
import signal
import sys
from typing import List, Optional

from app.application.event_processor import WorkerLoop
from app.bootstrap import build_container
from app.config.logging import configure_logging
from app.config.settings import get_settings
from app.domain.models.event import EventCategory

logger = logging.getLogger("app.worker")

ALL_CATEGORIES = "all"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Payment event worker")
    parser.add_argument(
        "--category",
        choices=[c.value for c in EventCategory] + [ALL_CATEGORIES],
        default=ALL_CATEGORIES,
        help="Event category to consume (default: all)",
    )
    return parser.parse_args(argv)


def selected_categories(category: str) -> List[str]:
    if category == ALL_CATEGORIES:
        return [c.value for c in EventCategory]
    return [category]


async def run(category: str) -> None:
    settings = get_settings()
    container = build_container(settings)
    workers: List[WorkerLoop] = [
        container.pipelines[name].worker(
            backoff_seconds=settings.worker_backoff_seconds,
            pop_timeout=settings.queue_pop_timeout_seconds,
        )
        for name in selected_categories(category)
    ]
    tasks = [asyncio.create_task(w.run()) for w in workers]

    def _shutdown() -> None:
        logger.info("worker_shutdown_requested")
        for w in workers:
            w.stop()
        # A blocking pop only returns on a message; cancel to exit promptly.
        for t in tasks:
            t.cancel()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _shutdown)
        except NotImplementedError:
            # add_signal_handler is unavailable on Windows event loops.
            pass

    try:
        await asyncio.gather(*tasks, return_exceptions=True)
    finally:
        await container.aclose()
        logger.info("worker_exited")


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(get_settings().log_level)
    logger.info("worker_starting", extra={"categories": selected_categories(args.category)})
    asyncio.run(run(args.category))
    return 0


if __name__ == "__main__":
    sys.exit(main())
