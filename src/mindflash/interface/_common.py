"""Shared helpers for CLI commands."""

import logging
from pathlib import Path
from typing import Any, NoReturn

import typer

from mindflash.application.config import AppConfig, resolve_config
from mindflash.application.context import StudyContext
from mindflash.application.factory import build_context
from mindflash.domain.errors import MindFlashError
from mindflash.infrastructure.repository import LibraryRepository

logger = logging.getLogger(__name__)

LOG_FILE = "mindflash.log"


class LibraryLogHandler(logging.FileHandler):
    """File handler writing CLI activity to `<log_dir>/mindflash.log`."""


def configure_logging(config: AppConfig) -> None:
    """Apply the configured verbosity and attach the log file handler."""
    root = logging.getLogger()
    if config.verbose >= 3:
        root.setLevel(logging.DEBUG)
    elif config.verbose >= 2:
        root.setLevel(logging.INFO)
    else:
        root.setLevel(logging.WARNING)

    log_file = (config.log_dir / LOG_FILE).resolve()
    for handler in root.handlers[:]:
        if isinstance(handler, LibraryLogHandler):
            if Path(handler.baseFilename) == log_file:
                return
            root.removeHandler(handler)
            handler.close()

    try:
        config.log_dir.mkdir(parents=True, exist_ok=True)
        handler = LibraryLogHandler(log_file, encoding="utf-8")
    except OSError as e:
        logger.warning(f"Cannot write logs to {config.log_dir}: {e}")
        return
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.addHandler(handler)


def _resolve_with_overrides(ctx: typer.Context | None = None, **kwargs: Any) -> AppConfig:
    """Resolve config, layering global options from the root callback and command kwargs."""
    overrides: dict[str, Any] = {}
    if ctx is not None and ctx.obj:
        data_file: Path | None = ctx.obj.get("data_file")
        if data_file is not None:
            overrides["data_file"] = data_file
        overrides["verbose"] = ctx.obj.get("verbose_bonus")
    overrides.update(kwargs)
    config = resolve_config(overrides)
    configure_logging(config)
    return config


def open_library(
    ctx: typer.Context | None = None, **kwargs: Any
) -> tuple[StudyContext, LibraryRepository]:
    config = _resolve_with_overrides(ctx, **kwargs)
    try:
        return build_context(config)
    except MindFlashError as e:
        fail(e)


def fail(error: Exception) -> NoReturn:
    """Report a user-facing error and exit with status 1."""
    logger.debug("Command failed", exc_info=error)
    typer.secho(f"Error: {error}", fg="red", err=True)
    raise typer.Exit(1)
