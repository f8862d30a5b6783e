import logging
import sys
from datetime import datetime
from pathlib import Path

from race_board.config import Config

PACKAGE_LOGGER = 'race_board'

def _configure_package_logger() -> logging.Logger:
    """Attach console and daily file handlers to the package logger, once."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if package_logger.handlers:
        return package_logger

    log_level = logging.DEBUG if Config.DEBUG else logging.INFO
    package_logger.setLevel(logging.DEBUG)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    # The file always gets debug output (gated reveals, recomputes)
    log_dir = Path(Config.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(
        log_dir / f'race_board_{datetime.now().strftime("%Y%m%d")}.log',
        encoding='utf-8'
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    package_logger.addHandler(file_handler)

    return package_logger

def setup_logger(name: str) -> logging.Logger:
    """
    Logger for a module of the bot.

    Handlers live on the package logger, so loggers obtained with
    logging.getLogger(__name__) inside race_board share the same output.
    """
    _configure_package_logger()
    if name == '__main__':
        name = f'{PACKAGE_LOGGER}.main'
    return logging.getLogger(name)
