"""Main entry point for Janggi AI server."""

import argparse
import logging
import os
import uvicorn

from janggi.config import Settings

if __name__ == "__main__":
    settings = Settings.from_env()

    parser = argparse.ArgumentParser(description="Janggi AI Server")
    parser.add_argument(
        "--host",
        type=str,
        default=settings.host,
        help=f"Host to bind to (default: {settings.host})",
    )
    parser.add_argument(
        "--port",
        "-p",
        type=int,
        default=settings.port,
        help=f"Port to bind to (default: {settings.port})",
    )
    parser.add_argument(
        "--difficulty",
        "-d",
        choices=["easy", "medium", "hard"],
        default=None,
        help="Default difficulty for new games",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=settings.log_level,
        help=f"Logging level (default: {settings.log_level})",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # api.py reads its settings from the environment when imported
    if args.difficulty:
        os.environ["JANGGI_DEFAULT_DIFFICULTY"] = args.difficulty
        logging.getLogger(__name__).info("Default difficulty: %s", args.difficulty)
    os.environ["JANGGI_LOG_LEVEL"] = args.log_level.upper()

    uvicorn.run(
        "api:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level.lower(),
    )
