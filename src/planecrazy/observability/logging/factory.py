"""Observability – LoggerFactory (structlog over stdlib logging)."""
from __future__ import annotations

import logging
from typing import Any

import structlog


class LoggerFactory:
    """Configure structlog to render through a stdlib ``StreamHandler``.

    ``json_output=True`` renders one JSON object per line (the default for
    deployed use); ``False`` switches to structlog's console renderer.
    """

    @staticmethod
    def configure(
        level: int | str = logging.INFO,
        *,
        json_output: bool = True,
        stream: Any = None,
    ) -> None:
        shared_processors: list[Any] = [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
        ]
        structlog.configure(
            processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        renderer: Any = (
            structlog.processors.JSONRenderer()
            if json_output
            else structlog.dev.ConsoleRenderer(colors=False)
        )
        formatter = structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.format_exc_info,
                renderer,
            ],
        )
        handler = logging.StreamHandler(stream)
        handler.setFormatter(formatter)
        root = logging.getLogger()
        root.handlers.clear()
        root.addHandler(handler)
        root.setLevel(level.upper() if isinstance(level, str) else level)


__all__ = ["LoggerFactory"]
