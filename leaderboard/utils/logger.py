import logging
import sys
from datetime import datetime
from pathlib import Path

from leaderboard.config import Config


def resolve_log_level(name: str) -> int:
    """Level for a logger: the longest matching LOG_LEVELS prefix, else LOG_LEVEL"""
    level_name = Config.LOG_LEVEL
    matched = ''
    for prefix, override in Config.get_log_level_overrides().items():
        if (name == prefix or name.startswith(prefix + '.')) and len(prefix) > len(matched):
            matched, level_name = prefix, override

    level = logging.getLevelName(level_name)
    return level if isinstance(level, int) else logging.INFO


def setup_logger(name: str) -> logging.Logger:
    """Setup a leaderboard logger: console at the module's level, full detail to the daily file"""

    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    log_level = resolve_log_level(name)
    # The file handler keeps DEBUG even when the console is quieter
    logger.setLevel(min(log_level, logging.DEBUG) if Config.DEBUG else log_level)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    log_dir = Path(Config.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(
        log_dir / f'leaderboard_{datetime.now().strftime("%Y%m%d")}.log',
        encoding='utf-8'
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    return logger
