import sys

from loguru import logger

from moccam.core.settings import settings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def configure_logging(level: str | None = None) -> None:
    """Gắn sink stderr duy nhất cho loguru theo LOG_LEVEL."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=(level or settings.LOG_LEVEL).upper(),
        format=LOG_FORMAT,
        backtrace=False,
        diagnose=False,
    )
