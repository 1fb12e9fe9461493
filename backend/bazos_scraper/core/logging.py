import logging
from typing import Optional

from bazos_scraper.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Install the root handler used by the CLI job and the API."""
    level_name = (level or settings.LOG_LEVEL).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)
    # requests/urllib3 connection chatter is noise at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)
