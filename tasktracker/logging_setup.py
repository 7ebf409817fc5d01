import logging
import sys


def setup_logging(level=logging.INFO) -> None:
    """Configure the root logger once; later calls only adjust the level."""
    logger = logging.getLogger()
    if isinstance(level, str):
        level = level.upper()
    logger.setLevel(level)
    if logger.handlers:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s %(levelname)s %(name)s - %(message)s"
    ))
    logger.addHandler(handler)
