import sys

from loguru import logger

from core.config import settings


def setup_logger(level: str | None = None):
    """Loguru 기본 설정. 앱 시작 시 한 번 호출.

    level을 생략하면 settings.LOG_LEVEL (DEBUG=True면 DEBUG)을 쓴다.
    """
    if level is None:
        level = "DEBUG" if settings.DEBUG else settings.LOG_LEVEL

    logger.remove()
    logger.add(
        sys.stderr,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        ),
        level=level,
    )
    return logger
