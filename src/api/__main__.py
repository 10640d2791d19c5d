"""Entry point for running the API server."""
import logging

import uvicorn

from core.config import get_settings


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # Graceful shutdown: stop accepting connections, give in-flight requests
    # shutdown_timeout_seconds to finish, then close the rest.
    uvicorn.run(
        "api.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        timeout_graceful_shutdown=settings.shutdown_timeout_seconds,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
