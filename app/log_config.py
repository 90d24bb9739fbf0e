import logging
import os


def configure_logging() -> None:
    """Configure process-wide logging defaults once, before the app is built."""
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
