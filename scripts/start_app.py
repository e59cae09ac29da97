#!/usr/bin/env python3
"""Start the FastAPI application with Logfire error tracking for startup errors."""

import sys
import logfire
import uvicorn

from bizops.config import Settings, ensure_deployable
from bizops.util.error import ConfigurationError
from bizops.util.logging import setup_logging
from bizops.util.observability import configure_logfire


def main() -> int:
    """Start the application and log any startup errors to Logfire."""
    settings = Settings()

    # Configure Logfire early to catch startup errors
    configure_logfire(settings)
    setup_logging(settings)

    try:
        ensure_deployable(settings)
    except ConfigurationError as e:
        logfire.error("Refusing to start", problems=e.problems)
        for problem in e.problems:
            print(f"Error: {problem}", file=sys.stderr)
        return 1

    try:
        logfire.info("Starting FastAPI application", port=settings.port)

        # The app module is imported by uvicorn after Logfire is configured
        uvicorn.run(
            "bizops.interface.api.app:app",
            host="0.0.0.0",
            port=settings.port,
            log_level="debug" if settings.debug else "info",
            proxy_headers=True,
        )

        return 0

    except Exception as e:
        logfire.error(
            "Application startup failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        # Re-raise so the container fails properly
        raise


if __name__ == "__main__":
    sys.exit(main())
