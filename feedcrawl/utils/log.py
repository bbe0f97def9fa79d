# feedcrawl/utils/log.py
# Process-wide logging for feedcrawl. get_logger(name) sets up the root logger
# once: console output always, plus a rotating file under LOG_DIR when
# LOG_TO_FILE=true. Each poller runs in its own thread, so records carry the
# thread name (poll-<feed name>).

from __future__ import annotations
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

_FMT = "%(asctime)s %(levelname)s %(name)s [%(threadName)s]: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"

_configured = False


def _level() -> int:
    lvl = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").strip().upper())
    return lvl if isinstance(lvl, int) else logging.INFO


def _file_handler() -> logging.Handler:
    log_dir = Path(os.getenv("LOG_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(
        log_dir / "feedcrawl.log",
        maxBytes=int(os.getenv("LOG_MAX_BYTES", "1048576")),
        backupCount=int(os.getenv("LOG_BACKUPS", "5")),
        encoding="utf-8",
    )


def configure(force: bool = False) -> None:
    """Install feedcrawl's handlers on the root logger (idempotent unless force)."""
    global _configured
    if _configured and not force:
        return

    lvl = _level()
    root = logging.getLogger()
    root.setLevel(lvl)
    for h in list(root.handlers):
        root.removeHandler(h)

    handlers = [logging.StreamHandler()]
    if os.getenv("LOG_TO_FILE", "false").strip().lower() == "true":
        handlers.append(_file_handler())
    formatter = logging.Formatter(_FMT, datefmt=_DATEFMT)
    for h in handlers:
        h.setLevel(lvl)
        h.setFormatter(formatter)
        root.addHandler(h)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a named logger, configuring the root logger on first use.

    Usage:
        from .utils.log import get_logger
        logger = get_logger("scheduler")
    """
    configure()
    return logging.getLogger(name)
