from loguru import logger
import sys
from pathlib import Path

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function}:{line} | {message}"

def setup_logger(config):
    """Configure loguru sinks for a provisioning run.

    Diagnostics go to stdout. A rotating file sink is added when
    ``file_path`` is set; an empty value disables it.
    """
    logger.remove()

    # Console logger
    logger.add(
        sys.stdout,
        format=LOG_FORMAT,
        level=config.get('level', 'INFO')
    )

    file_path = config.get('file_path')
    if file_path:
        log_path = Path(file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path,
            rotation="10 MB",
            retention="7 days",
            format=LOG_FORMAT,
            level=config.get('level', 'INFO')
        )

    return logger
