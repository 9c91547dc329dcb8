"""
Logging configuration: a timestamped log file plus errors on stderr
"""
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple

LOGGER_NAME = 'mp3_splitter'
LOG_FILE_PREFIX = 'mp3_splitter_'


def setup_logging(log_dir='logs', level: str = 'DEBUG', file_logging: bool = True,
                  verbose: bool = False) -> Tuple[logging.Logger, Optional[Path]]:
    """
    Set up logging configuration with both file and console handlers

    Args:
        log_dir: Directory for log files, created if missing
        level: Level name for the file handler (e.g. "INFO", "DEBUG")
        file_logging: Write a log file at all
        verbose: Show INFO messages on stderr instead of errors only

    Returns:
        (logger, log_file); log_file is None when file logging is disabled
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    # Replace handlers from an earlier call
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    log_file = None
    if file_logging:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        log_file = log_dir / f'{LOG_FILE_PREFIX}{timestamp}.log'

        # File handler
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(getattr(logging, str(level).upper(), logging.DEBUG))
        file_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    # Console handler - only errors to stderr unless verbose
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.INFO if verbose else logging.ERROR)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    logger.addHandler(console_handler)

    return logger, log_file
