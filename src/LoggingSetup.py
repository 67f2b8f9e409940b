# src/LoggingSetup.py
import sys
import logging
from pathlib import Path
from logging.handlers import RotatingFileHandler

LOG_FILE_NAME = "dictation.log"
LOG_FORMAT = '[%(asctime)s] [%(levelname)s] %(name)s: %(message)s'
LOG_MAX_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5

# Third-party loggers that trace every frame at DEBUG
NOISY_LOGGERS = ('websockets',)


def setup_logging(logs_dir: Path, verbose: bool = False, is_frozen: bool = False) -> Path:
    """
    Configure the root logger for the dictation client.

    Log records go to a rotating ``dictation.log`` in logs_dir and, when
    started from a terminal, to stdout as well. The websockets library is
    kept at WARNING unless verbose, so frame traces do not flood the log.

    Args:
        logs_dir: Directory to store log files
        verbose: If True, DEBUG for the app and websockets; otherwise INFO
        is_frozen: If True, skip console handler (frozen app has no console)

    Returns:
        Path of the active log file
    """
    logs_dir.mkdir(parents=True, exist_ok=True)
    level = logging.DEBUG if verbose else logging.INFO
    formatter = logging.Formatter(LOG_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    log_file = logs_dir / LOG_FILE_NAME
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding='utf-8'
    )
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    if not is_frozen:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)

    logging.info(f"Logging to {log_file}: level={logging.getLevelName(level)}, frozen={is_frozen}")
    return log_file
