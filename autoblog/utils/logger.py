import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

LOG_FILE_NAME = 'autoblog.json.log'
CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class JsonFormatter(logging.Formatter):
    """One JSON object per record, for the log file."""

    def format(self, record):
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def _file_handler(log_dir: str) -> logging.Handler:
    path = Path(log_dir)
    path.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path / LOG_FILE_NAME)
    handler.setLevel(logging.INFO)
    handler.setFormatter(JsonFormatter())
    return handler


def get_logger(name: str, log_dir: Optional[str] = None):
    """
    Return ``name``'s logger with a console handler and a JSON file handler
    under ``log_dir`` (``LOG_DIR`` from settings when omitted).
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)
    if logger.handlers:
        return logger

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.INFO)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt='%H:%M:%S'))
    logger.addHandler(console)

    if log_dir is None:
        from autoblog.config import get_settings
        log_dir = get_settings().log_dir
    logger.addHandler(_file_handler(log_dir))

    return logger


def configure_logging(log_dir: Optional[str] = None):
    """Attach the console and JSON handlers to the package loggers."""
    for name in ('autoblog', 'blogapp'):
        get_logger(name, log_dir)
