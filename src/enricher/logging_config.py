"""Run logging for bgg-enricher.

Every run gets its own log file, ``{data_dir}/logs/{log_prefix}-{timestamp}.log``,
holding the full DEBUG trace (per-game progress, retries, request counts).
The terminal only shows INFO and up unless the run is verbose.
"""

import logging
from datetime import datetime
from pathlib import Path

from enricher.config import EnricherConfig

TERMINAL_FORMAT = "%(asctime)s %(levelname)-5s %(message)s"
TERMINAL_DATEFMT = "%H:%M:%S"
LOG_FILE_FORMAT = "%(asctime)s %(levelname)-5s [%(name)s] %(message)s"


def run_log_path(config: EnricherConfig, now: datetime | None = None) -> Path:
    """Log file path for a run started at ``now``."""
    stamp = (now or datetime.now()).strftime("%Y-%m-%d-%H%M%S")
    return Path(config.data_dir) / "logs" / f"{config.log_prefix}-{stamp}.log"


def _attach(root: logging.Logger, handler: logging.Handler, level: int, formatter: logging.Formatter) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    root.addHandler(handler)


def setup_logging(config: EnricherConfig, verbose: bool = False) -> Path:
    """Route the root logger to the terminal and a fresh run log file.

    Handlers left by an earlier call are removed, so a second run in the
    same process does not log twice. Loggers named in
    ``config.quiet_loggers`` are held at WARNING.

    Returns:
        Path of the run log file.
    """
    log_file = run_log_path(config)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.handlers.clear()

    _attach(
        root,
        logging.StreamHandler(),
        logging.DEBUG if verbose else logging.INFO,
        logging.Formatter(TERMINAL_FORMAT, datefmt=TERMINAL_DATEFMT),
    )
    _attach(
        root,
        logging.FileHandler(str(log_file), encoding="utf-8"),
        logging.DEBUG,
        logging.Formatter(LOG_FILE_FORMAT),
    )

    for name in config.quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)

    return log_file
