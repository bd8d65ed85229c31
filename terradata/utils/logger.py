"""Logging configuration using Loguru."""

import sys

from loguru import logger

from terradata.utils.config import Settings, get_project_root, settings


def setup_logging(config: Settings = settings) -> None:
    logger.remove()

    # Console
    logger.add(
        sys.stderr,
        format=config.logging.format,
        level=config.logging.level,
        colorize=True,
    )

    if config.logging.log_to_file:
        log_dir = get_project_root() / "logs"
        log_dir.mkdir(exist_ok=True)

        # File
        logger.add(
            log_dir / "terradata.log",
            format=config.logging.format,
            level=config.logging.level,
            rotation=config.logging.rotation,
            retention=config.logging.retention,
            compression="zip",
        )

        # Errors only
        logger.add(
            log_dir / "errors.log",
            format=config.logging.format,
            level="ERROR",
            rotation=config.logging.rotation,
            retention=config.logging.retention,
            compression="zip",
        )

    logger.info(f"Logging initialized - Level: {config.logging.level}")
