"""Main application entry point."""

import argparse
import logging

import uvicorn
from dotenv import load_dotenv

from src.services.config import get_settings
from src.services.logging import get_log_level, setup_server_logging

logger = logging.getLogger(__name__)


def main() -> None:
    """Serve the admin API with uvicorn."""
    parser = argparse.ArgumentParser(description="Matisse condominium administration API")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes (development)")
    args = parser.parse_args()

    # Load environment variables before settings are first read
    load_dotenv()
    settings = get_settings()
    setup_server_logging(log_file=settings.log_file, level_name=settings.log_level)

    logger.info("Starting admin API on %s:%d (backend %s)", args.host, args.port, settings.backend_url)
    uvicorn.run(
        "src.api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=logging.getLevelName(get_log_level(settings.log_level)).lower(),
    )


if __name__ == "__main__":
    main()
