import sys

from loguru import logger

from .config import get_settings


logger.remove()
logger.add(
    sys.stderr,
    level=get_settings().log_level.upper(),
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan> - {message}",
)

__all__ = ["logger"]
