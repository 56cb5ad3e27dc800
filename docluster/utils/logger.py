"""Logging setup shared by the CLI runner and the HTTP backend."""

import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

from docluster.config_schema import LoggingConfig

PACKAGE_LOGGER = "docluster"


def setup_logger(
    config: Optional[LoggingConfig] = None,
    level: Optional[str] = None,
    names: Iterable[str] = (PACKAGE_LOGGER,),
    overwrite: bool = False
) -> logging.Logger:
    """
    Attach console (stderr) and optional file handlers to the named loggers.

    Stdout is left alone so the CLI can print JSON results there.

    Args:
        config: Validated `logging` section of config.json (defaults if None)
        level: Override for config.level (e.g. from --log-level)
        names: Logger names to configure; module loggers below them inherit
        overwrite: Truncate config.file instead of appending

    Returns:
        The first configured logger
    """
    config = config or LoggingConfig()
    log_level = getattr(logging, (level or config.level).upper())
    formatter = logging.Formatter(config.format)

    log_path = Path(config.file) if config.file else None
    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        if overwrite and log_path.exists():
            log_path.unlink()

    configured = []
    for name in names:
        logger = logging.getLogger(name)
        logger.setLevel(log_level)

        # Repeated setup (tests, reloads) must not duplicate output
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        if log_path is not None:
            file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

        configured.append(logger)

    if not configured:
        raise ValueError("setup_logger needs at least one logger name")
    return configured[0]
