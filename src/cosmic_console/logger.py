import logging
from pathlib import Path
from typing import Optional

from cosmic_console.runtime_config import get_data_dir

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO", log_file: Optional[Path] = None) -> Path:
    """Send the console's own diagnostics to a log file.

    The full-screen console owns the terminal, so nothing goes to stderr.
    Returns the path of the log file.
    """
    if log_file is None:
        log_dir = get_data_dir()
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / "cosmic_console.log"

    logger = logging.getLogger("cosmic_console")
    logger.setLevel(level.upper())
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(file_handler)
    logger.propagate = False
    return log_file
