"""Local launcher for the decision API."""

import argparse

import uvicorn

from infra.config import get_settings
from infra.logger import configure_logging, get_logger


def main():
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Run the skirmish minimax decision API.")
    parser.add_argument("--host", default=settings.host, help=f"Host to bind (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"Port for the API (default: {settings.port})")
    parser.add_argument(
        "--reload",
        dest="reload",
        action="store_true",
        default=False,
        help="Enable auto-reload for development (default: off)",
    )
    parser.add_argument(
        "--no-reload",
        dest="reload",
        action="store_false",
        help="Disable auto-reload",
    )
    parser.add_argument("--log-file", default=None, help="Also write logs to storage/logs/<name>")
    args = parser.parse_args()

    # Configure logging once at startup (console + optional file).
    configure_logging(level=settings.log_level, json=settings.log_json, log_file=args.log_file)
    log = get_logger(__name__)

    url = f"http://{args.host}:{args.port}"
    log.info("Starting skirmish decision API at %s (default plies=%d)", url, settings.plies)
    uvicorn.run(
        "api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
