import logging
from letter_tracker.config import settings

def resolve_level(name: str) -> int:
    """Map a level name from settings to a logging level, INFO when unknown"""
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO

def setup_logger(name: str = "letter_tracker"):
    """Configure the service logger and quiet SQLAlchemy unless debugging"""

    logger = logging.getLogger(name)
    level = resolve_level(settings.log_level)
    logger.setLevel(level)

    # Engine echo handles SQL output when debug is on
    if not settings.debug:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    # Avoid stacking handlers on reload
    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(settings.log_format))

    logger.addHandler(console_handler)

    return logger

# Shared logger instance
logger = setup_logger()
