import inspect
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOGGER_NAME = "objgate"
VERSION = "1.0.0"


class ColoredFormatter(logging.Formatter):
    COLORS = {
        'DEBUG': '\033[2;36m',
        'INFO': '\033[0;32m',
        'WARNING': '\033[0;33m',
        'ERROR': '\033[0;31m',
        'CRITICAL': '\033[1;31m'
    }
    RESET = '\033[0m'

    def format(self, record):
        original = record.levelname
        log_color = self.COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{log_color}{record.levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            # Other handlers share the record
            record.levelname = original


class ContextFilter(logging.Filter):
    """Adds the calling class and function to every record"""

    def filter(self, record):
        record.cls = None
        record.func = record.funcName

        frame = inspect.currentframe()
        while frame is not None:
            code = frame.f_code
            if code.co_filename == record.pathname and code.co_name == record.funcName:
                if 'self' in frame.f_locals:
                    record.cls = frame.f_locals['self'].__class__.__name__
                break
            frame = frame.f_back

        return True


def setup_logger(
        version: str,
        name: str = LOGGER_NAME,
        log_file: Optional[str] = None,
        level: int = logging.INFO,
) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    fmt = f'{version} - %(cls)s - %(func)s - %(asctime)s - %(name)s - %(levelname)s - %(message)s'

    logger.setLevel(level)
    context_filter = ContextFilter()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(ColoredFormatter(fmt))
    console_handler.addFilter(context_filter)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setFormatter(logging.Formatter(fmt))
        file_handler.addFilter(context_filter)
        logger.addHandler(file_handler)

    return logger


def get_logger(
    name: str = LOGGER_NAME,
    log_file: Optional[str] = None,
    level: Optional[int] = None,
    enable_debug: bool = False,
) -> logging.Logger:
    """
    Get configured logger instance.

    Args:
        name: Logger name (default: "objgate")
        log_file: Optional log file path; console only when None
        level: Optional log level (default: INFO, or DEBUG if enable_debug=True)
        enable_debug: If True, sets level to DEBUG (overrides level parameter)

    Returns:
        Configured Logger instance
    """
    if enable_debug:
        level = logging.DEBUG
    elif level is None:
        level = logging.INFO

    return setup_logger(VERSION, name, log_file, level=level)


def get_level_from_config(config) -> int:
    """Numeric level from LOG_LEVEL; LOG_ENABLE_DEBUG forces DEBUG, unknown names fall back to INFO"""
    if config.log_enable_debug:
        return logging.DEBUG
    level = logging.getLevelName(str(config.log_level).upper())
    if not isinstance(level, int):
        level = logging.INFO
    return level


def get_logger_from_config(config) -> logging.Logger:
    """
    Get logger configured from a Settings object.

    Args:
        config: Settings instance with log_level, log_file, log_enable_debug
    """
    level = get_level_from_config(config)

    return get_logger(
        name=LOGGER_NAME,
        log_file=config.log_file,
        level=level,
        enable_debug=config.log_enable_debug,
    )
