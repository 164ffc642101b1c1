# infrastructure/logging/log_setup.py
import sys

from loguru import logger

LOG_FORMAT = "<level>{level: <8}</level> {message}"


def setup_console_logging(level: str = "WARNING") -> None:
    logger.remove()
    # resolve sys.stderr per message so redirected streams are honoured
    logger.add(lambda msg: print(msg, end="", file=sys.stderr), level=level.upper(), format=LOG_FORMAT)
