# ops_dashboard/logger.py
import logging
from typing import List, Optional

from ops_dashboard.config import config

# Create formatter
formatter = logging.Formatter(
    fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(filename)s:%(lineno)d | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)

_handlers: List[logging.Handler] = []
_file_error: Optional[str] = None


def _build_handlers() -> List[logging.Handler]:
    """Create the shared console and file handlers once."""
    global _file_error

    if _handlers:
        return _handlers

    # Console handler (for local runs)
    console_handler = logging.StreamHandler()
    console_handler.setLevel("WARNING" if config.is_prod else "INFO")
    console_handler.setFormatter(formatter)
    _handlers.append(console_handler)

    # File handler; read-only deployments fall back to console only
    try:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(config.log_file, encoding="utf-8")
    except OSError as e:
        _file_error = f"File logging disabled ({config.log_file}): {e}"
    else:
        file_handler.setLevel(config.log_level)
        file_handler.setFormatter(formatter)
        _handlers.append(file_handler)

    return _handlers


def get_logger(name: str = "ops_dashboard") -> logging.Logger:
    """Return a configured logger instance."""
    logger = logging.getLogger(name)
    logger.setLevel(config.log_level)

    # Avoid duplicate handlers if called multiple times
    if not logger.handlers:
        for handler in _build_handlers():
            logger.addHandler(handler)
        logger.propagate = False
        if _file_error:
            logger.warning(_file_error)

    return logger
