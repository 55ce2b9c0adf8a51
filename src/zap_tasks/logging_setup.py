# src/zap_tasks/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Chatty at INFO/WARNING during a normal run; the file handler still gets WARNING+.
_QUIET_LOGGERS = ("httpx", "httpcore", "openai", "googleapiclient", "google_auth_httplib2", "google.auth")

# googleapiclient warns on every build() that its discovery file cache is
# unavailable; we always build with cache_discovery=False.
_DROPPED_PREFIXES = ("googleapiclient.discovery_cache",)


class _ConsoleFilter(logging.Filter):
    """
    Console shows:
    - every zap_tasks record at the handler level
    - Google API / LLM SDK records only when they are errors
    - never the discovery-cache chatter
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name == "zap_tasks" or name.startswith("zap_tasks."):
            return True
        if name.startswith(_DROPPED_PREFIXES):
            return False
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/zap",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Console (stderr, filtered) plus a full log file in `log_dir`.

    The file keeps prompts and raw model output at DEBUG. Returns the log
    file path. Call once, before the first log record.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "zap.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleFilter())
    root.addHandler(console)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    # warnings.warn(...) -> 'py.warnings', which the console filter treats as third-party.
    logging.captureWarnings(True)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return log_file
