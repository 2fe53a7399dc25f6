import logging
import sys

DEFAULT_LOGGER_NAME = "PdfScraperLogger"
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Global dictionary to hold configured loggers
_loggers = {}

def setup_logger(name: str = DEFAULT_LOGGER_NAME, level_str: str | None = DEFAULT_LOG_LEVEL) -> logging.Logger:
    """
    Configures and returns a logger instance. Avoids duplicate handlers.

    Args:
        name (str): The name for the logger.
        level_str (str | None): The desired logging level as a string (e.g., "DEBUG", "INFO").
                                Empty, None or unknown values fall back to INFO.

    Returns:
        logging.Logger: The configured logger instance.
    """
    log_level = getattr(logging, (level_str or DEFAULT_LOG_LEVEL).upper(), logging.INFO)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    if name in _loggers:
        # Already configured: only the level may change
        logger = _loggers[name]
        if logger.level != log_level:
            logger.setLevel(log_level)
            logger.debug(f"Logger '{name}' level updated to {logging.getLevelName(log_level)}.")
        return logger

    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    # Prevent adding duplicate handlers if logger already configured externally
    if not logger.handlers:
        log_format = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

        stdout_handler = logging.StreamHandler(sys.stdout)
        stdout_handler.setFormatter(log_format)
        logger.addHandler(stdout_handler)

        logger.info(f"Logger '{name}' configured with level {logging.getLevelName(log_level)}.")

    _loggers[name] = logger
    return logger
