"""Logging utilities for kargogen commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, MutableMapping, Tuple

_LOGGER_NAME = "kargogen"
_CONSOLE_FORMAT = "[kargogen] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class ServiceLogAdapter(logging.LoggerAdapter):
    """Tags records with the service they concern.

    Messages are prefixed with ``[<service>]`` and the record carries a
    ``service`` attribute, so handlers can filter per service.
    """

    def __init__(self, logger: logging.Logger, service: str) -> None:
        super().__init__(logger, {"service": service})

    @property
    def service(self) -> str:
        return str(self.extra["service"])

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> Tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**kwargs.get("extra", {}), "service": self.service}
        return f"[{self.service}] {msg}", kwargs


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the kargogen hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def service_logger(logger: logging.Logger, service: str) -> ServiceLogAdapter:
    return ServiceLogAdapter(logger, service)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Attach console and optional file handlers to the kargogen logger."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False
    _reset_handlers(logger)

    handlers: list[logging.Handler] = [_handler(logging.StreamHandler(), _CONSOLE_FORMAT, level)]
    if log_file is not None:
        handlers.append(
            _handler(logging.FileHandler(log_file, encoding="utf-8"), _FILE_FORMAT, level)
        )
    for handler in handlers:
        logger.addHandler(handler)
    return logger


def _reset_handlers(logger: logging.Logger) -> None:
    # Repeated CLI invocations in one process must not stack handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def _handler(handler: logging.Handler, fmt: str, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


__all__ = ["ServiceLogAdapter", "configure_logging", "get_logger", "service_logger"]
