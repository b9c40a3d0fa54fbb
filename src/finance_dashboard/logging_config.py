import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level>"
)

def configure_logging(level: str = "WARNING", verbose: bool = False) -> int:
    """
    Send log output to stderr, keeping stdout for the dashboard itself.

    Args:
        level: Minimum level from settings
        verbose: Force DEBUG output

    Returns:
        The loguru handler ID
    """
    logger.remove()
    return logger.add(
        sys.stderr,
        level="DEBUG" if verbose else level,
        format=LOG_FORMAT,
    )
