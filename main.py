#!/usr/bin/env python3
"""
Instagram Cleanup - Main entry point.

Serves the job control API that unlikes liked posts or deletes the account's
own comments in background jobs.
"""

import argparse
import signal
import sys
from pathlib import Path

# Load environment variables before settings are read
from dotenv import load_dotenv

load_dotenv()

from config import settings  # noqa: E402
from igcleanup.api import create_app  # noqa: E402
from igcleanup.jobs import JobRunner  # noqa: E402
from igcleanup.storage import JobStore  # noqa: E402
from igcleanup.utils.logging import setup_logging  # noqa: E402


def parse_arguments() -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description="Background Instagram unlike / comment cleanup jobs over an HTTP API.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Serve on the default address (settings / .env)
  python main.py

  # Serve on all interfaces with a custom store file
  python main.py --host 0.0.0.0 --port 8080 --store-path /var/lib/igcleanup/jobs.json
        """,
    )

    parser.add_argument(
        "--host",
        type=str,
        default=settings.IGCLEANUP_HOST,
        help="Address to bind. Defaults to IGCLEANUP_HOST.",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=settings.IGCLEANUP_PORT,
        help="Port to bind. Defaults to IGCLEANUP_PORT.",
    )

    parser.add_argument(
        "--store-path",
        type=Path,
        default=Path(settings.IGCLEANUP_STORE_PATH),
        help="JSON file holding jobs and settings. Defaults to IGCLEANUP_STORE_PATH.",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level. Defaults to LOG_LEVEL.",
    )

    args = parser.parse_args()

    if not 0 < args.port < 65536:
        parser.error(f"Invalid port: {args.port}")

    return args


def main() -> int:
    """
    Main entry point: start the job runner and serve the API until interrupted.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    args = parse_arguments()
    logger = setup_logging(args.log_level)

    store = JobStore(args.store_path)
    runner = JobRunner(store)
    app = create_app(store=store, runner=runner)

    def signal_handler(signum, frame):
        logger.warning("Interrupt received, stopping active jobs...")
        runner.shutdown()
        logger.info("Exiting...")
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    logger.info("=" * 60)
    logger.info("Instagram Cleanup - Job API")
    logger.info("=" * 60)
    logger.info(f"Listening on: http://{args.host}:{args.port}")
    logger.info(f"Store: {args.store_path}")
    logger.info("=" * 60)

    runner.start()
    try:
        app.run(host=args.host, port=args.port, threaded=True, use_reloader=False)
    except OSError as e:
        logger.error(f"Could not start server: {e}")
        runner.shutdown()
        return 1

    runner.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())
