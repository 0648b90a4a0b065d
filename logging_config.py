"""
Centralized Logging Configuration
Provides console and rotating file logging for the data layer
"""
import logging
import logging.handlers
from pathlib import Path


def setup_logging(config):
    """
    Setup application-wide logging with file rotation and console output

    Args:
        config: Configuration class or instance (see config.py)

    Returns:
        The configured root logger
    """
    log_level = getattr(logging, str(config.LOG_LEVEL).upper(), logging.INFO)
    log_format = config.LOG_FORMAT

    # Create logs directory if it doesn't exist
    log_dir = Path(config.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / config.LOG_FILE

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Clear existing handlers
    root_logger.handlers = []

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(log_format))
    root_logger.addHandler(console_handler)

    file_handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(logging.Formatter(log_format))
    root_logger.addHandler(file_handler)

    # Third-party loggers are noisy at DEBUG
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
    logging.getLogger('alembic').setLevel(logging.WARNING)

    root_logger.info(f"Logging initialized at {logging.getLevelName(log_level)} level")
    root_logger.info(f"Log file: {log_path}")

    return root_logger


def get_logger(name):
    """
    Get a logger instance for a specific module

    Args:
        name: Module name (usually __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
