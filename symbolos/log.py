"""Loguru setup shared by the CLI, the API and library callers."""

import sys
from pathlib import Path
from typing import Any, Optional, Union

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}"


def configure_logging(
    level: str = "INFO",
    sink: Any = sys.stderr,
    log_dir: Optional[Union[str, Path]] = None,
    rotation: str = "1 day",
    retention: str = "30 days",
) -> None:
    """
    Replace loguru's default handler with one console sink and, when
    ``log_dir`` is given, a daily rotated file sink.
    """
    logger.remove()
    logger.add(sink, level=level, format=LOG_FORMAT)

    if log_dir is not None:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        logger.add(
            str(Path(log_dir) / "{time:YYYY-MM-DD}.log"),
            level=level,
            format=LOG_FORMAT,
            rotation=rotation,
            retention=retention,
            enqueue=True,
            backtrace=True,
        )
