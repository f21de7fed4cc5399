import logging
import logging.handlers
from pathlib import Path
from typing import Optional

LOG_FILE_NAME = "trade_referee.log"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_HANDLER_TAG = "_trade_referee_handler"


def setup_logging(log_level: str = "INFO", log_dir: Optional[Path] = None) -> Path:
    """Configure root logging for the trade referee command-line tools.

    The engines only emit records; handlers are installed here, once per
    process. Calling again is a no-op.

    Returns:
        Path of the rotating log file.
    """
    log_dir = Path(log_dir) if log_dir is not None else Path(__file__).parent.parent / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root_logger = logging.getLogger()
    if any(getattr(h, _HANDLER_TAG, False) for h in root_logger.handlers):
        return log_file  # Already configured

    level = getattr(logging, log_level.upper(), logging.INFO)
    root_logger.setLevel(level)

    # File handler with rotation (5MB max, keep 3 backups)
    file_handler = logging.handlers.RotatingFileHandler(
        log_file, maxBytes=5 * 1024 * 1024, backupCount=3
    )
    file_handler.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    for handler in (file_handler, console_handler):
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_TAG, True)
        root_logger.addHandler(handler)

    logging.getLogger(__name__).info("Logging initialized (level=%s, file=%s)", log_level, log_file)
    return log_file
