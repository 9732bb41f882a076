import logging

from seatbook.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging() -> None:
    """Configure root logging once from LOG_LEVEL."""
    logging.basicConfig(level=settings.LOG_LEVEL.upper(), format=LOG_FORMAT)
    # SQL echo is too noisy at INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
