"""
Logging setup for the API process.

Application loggers follow the configured level; SQLAlchemy and the HTTP
client stay at WARNING so request logs are not buried in driver chatter.
"""

import logging


def configure_logging(level: str = "INFO") -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )

    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logging.getLogger("stockledger").setLevel(log_level)
    logging.getLogger(__name__).info("Logging configured at level: %s", logging.getLevelName(log_level))
