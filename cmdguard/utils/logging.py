# cmdguard/utils/logging.py
"""
Logging configuration for cmdguard.
"""
import sys

from loguru import logger
from cmdguard.constants import LOG_DIR, LOG_FORMAT, LOG_ROTATION, LOG_RETENTION

# Messages logged before setup_logging() still need a name to format
logger.configure(extra={"name": "cmdguard"})


def setup_logging(debug: bool = False, log_to_file: bool = True) -> None:
    """
    Configure the application logging.
    
    Args:
        debug: Whether to enable debug logging on the console.
        log_to_file: Whether to also write a rotating log file under LOG_DIR.
    """
    # Remove default handlers
    logger.remove()
    
    # Console output stays quiet unless something needs attention
    log_level = "DEBUG" if debug else "WARNING"
    logger.add(
        sys.stderr,
        format=LOG_FORMAT,
        level=log_level,
        diagnose=debug,  # Include variable values in traceback if debug is True
    )
    
    if not log_to_file:
        return
    
    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.warning(f"Cannot create log directory {LOG_DIR}: {e}")
        return
    
    log_file = LOG_DIR / "cmdguard.log"
    logger.add(
        log_file,
        format=LOG_FORMAT,
        level="INFO",
        rotation=LOG_ROTATION,
        retention=LOG_RETENTION,
        compression="zip",
    )
    
    logger.debug(f"Logging initialized. Log file: {log_file}")


def get_logger(name: str = "cmdguard"):
    """
    Get a logger bound to the given module name.
    
    Args:
        name: The name for the logger.
        
    Returns:
        A loguru logger carrying ``name`` in its extra context.
    """
    return logger.bind(name=name)
