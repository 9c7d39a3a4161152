"""Structlog configuration helpers."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog

if TYPE_CHECKING:
    from resilience_pipeline.infrastructure.resilience.config import ResilienceConfigs


def configure_structlog(level: str = "INFO", json: bool = True) -> None:
    renderer = (
        structlog.processors.JSONRenderer()
        if json
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.getLogger("resilience_pipeline").setLevel(level.upper())
    logging.getLogger(__name__).info("structlog configured")


def _describe(config: Optional[Any]) -> Dict[str, Any]:
    if config is None:
        return {"enabled": False}
    fields = dict(vars(config))
    if "fallback_method" in fields:
        method = fields.pop("fallback_method")
        fields["fallback_method"] = getattr(method, "__qualname__", repr(method)) if method else None
    return fields


def log_resilience_config(configs: ResilienceConfigs, logger_name: str = "resilience_pipeline.boot") -> None:
    """Log the active configuration of every pattern, one event each."""
    logger = structlog.get_logger(logger_name)
    for pattern in ("timeout", "retry", "circuit_breaker", "fallback"):
        logger.info("resilience_config", pattern=pattern, **_describe(getattr(configs, pattern)))
