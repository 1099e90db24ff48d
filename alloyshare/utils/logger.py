"""Logging configuration using Loguru.

Every record carries the emitting module plus the execution context it was
bound to: the session `epoch` of the execution controller and the `model_id`
a share or derivation is about. Unbound fields render as "-".
"""

import sys
from pathlib import Path

from loguru import logger

# Defaults for the context fields referenced by the sink formats
_CONTEXT_DEFAULTS = {"module": "-", "epoch": "-", "model_id": "-"}

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[module]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "epoch={extra[epoch]} model={extra[model_id]} - <level>{message}</level>"
)
FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[module]}:{function}:{line} | "
    "epoch={extra[epoch]} model={extra[model_id]} - {message}"
)


def setup_logging(
    level: str = "INFO",
    log_to_file: bool = True,
    log_dir: str = "logs",
    file_rotation: str = "10 MB",
    file_retention: str = "7 days",
    compression: str = "zip",
    serialize: bool = True,
) -> None:
    """Configure Loguru logger with JSON serialization and file rotation."""
    logger.remove()
    logger.configure(extra=dict(_CONTEXT_DEFAULTS))

    # Console logging
    logger.add(
        sys.stderr,
        level=level,
        format=CONSOLE_FORMAT,
        colorize=True,
        serialize=False,
    )

    if log_to_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        # File logging; serialized records keep the context fields under "extra"
        logger.add(
            log_path / "alloyshare_{time:YYYY-MM-DD}.log",
            level=level,
            format=FILE_FORMAT,
            rotation=file_rotation,
            retention=file_retention,
            compression=compression,
            serialize=serialize,
            enqueue=True,
        )


def get_logger(name: str, **context):
    """
    Get a logger instance for a module.

    Args:
        name: Module name
        **context: Extra fields to bind, e.g. epoch or model_id
    """
    return logger.bind(module=name, **context)
