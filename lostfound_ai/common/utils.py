import logging
from typing import Optional

from .config import Settings, get_settings

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Configure root logging with a console handler and an optional activity file."""
    settings = settings or get_settings()

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if settings.log_file:
        handlers.insert(0, logging.FileHandler(settings.log_file))

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )
