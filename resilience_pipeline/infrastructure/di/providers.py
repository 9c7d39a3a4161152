"""Service registration for the DI container."""
from __future__ import annotations

from typing import Any, Callable, Optional

from resilience_pipeline.core.config import Settings, settings as default_settings
from resilience_pipeline.infrastructure.di.container import Container
from resilience_pipeline.infrastructure.di.scopes import Scope
from resilience_pipeline.infrastructure.observability import configure_structlog, log_resilience_config
from resilience_pipeline.infrastructure.resilience import ResilienceService


def configure_container(
    container: Container,
    settings: Optional[Settings] = None,
    fallback_method: Optional[Callable[..., Any]] = None,
) -> None:
    """Configure resilience dependencies.

    Configs are resolved eagerly so an invalid setting fails at startup rather
    than on the first protected call.
    """
    resolved_settings = settings or default_settings
    configure_structlog(resolved_settings.LOG_LEVEL, json=resolved_settings.LOG_JSON)
    configs = resolved_settings.to_resilience_configs(fallback_method=fallback_method)

    container.register_instance(Settings, resolved_settings)

    def build_service(c: Container) -> ResilienceService:
        log_resilience_config(configs)
        return ResilienceService(configs)

    container.register(ResilienceService, build_service, Scope.SINGLETON)


def get_configured_container() -> Container:
    """Return a configured container instance."""
    container = Container.get_instance()
    if not container.is_registered(ResilienceService):
        configure_container(container)
    return container
