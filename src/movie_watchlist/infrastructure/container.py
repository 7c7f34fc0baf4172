"""Dependency injection container."""

import inspect
import logging
from typing import Any, Dict, Optional, Type, TypeVar

from ..config import Config, ConfigManager
from ..core.interfaces import (
    IEnrichmentPipeline,
    IImageDownloadService,
    IOMDbService,
    ITMDbService,
    IWatchlistService,
    IWatchlistStore,
)
from .task_pool import TaskPool

T = TypeVar("T")


class Container:
    """Resolves services by interface, building each one at most once.

    Constructor parameters annotated with ``Config`` receive the loaded
    configuration; parameters annotated with a registered type receive that
    service. Everything else must have a default.
    """

    def __init__(self, config_manager: Optional[ConfigManager] = None) -> None:
        """Initialize container.

        Args:
            config_manager: Source of the configuration. If None, uses the default search.
        """
        self._implementations: Dict[Type, Type] = {}
        self._instances: Dict[Type, Any] = {}
        self._config_manager = config_manager or ConfigManager()
        self._config: Optional[Config] = None
        self._logger = logging.getLogger(__name__)

    def register_singleton(self, interface: Type[T], implementation: Type[Any]) -> None:
        """Bind an interface to a class built lazily on first ``get``."""
        self._implementations[interface] = implementation
        self._instances.pop(interface, None)
        self._logger.debug(f"Bound {interface.__name__} to {implementation.__name__}")

    def register_instance(self, interface: Type[T], instance: T) -> None:
        """Bind an interface to an already built object."""
        self._instances[interface] = instance
        self._logger.debug(f"Bound {interface.__name__} to {type(instance).__name__} instance")

    def get(self, interface: Type[T]) -> T:
        """Get the service bound to an interface.

        Raises:
            ValueError: If nothing is bound to the interface.
        """
        if interface in self._instances:
            return self._instances[interface]  # type: ignore[no-any-return]

        implementation = self._implementations.get(interface)
        if implementation is None:
            raise ValueError(f"Service not registered: {interface.__name__}")

        instance = self._build(implementation)
        self._instances[interface] = instance
        return instance  # type: ignore[no-any-return]

    def _build(self, implementation: Type[T]) -> T:
        """Call a constructor with its annotated dependencies."""
        kwargs: Dict[str, Any] = {}

        for name, param in inspect.signature(implementation.__init__).parameters.items():
            if name == "self" or param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue

            annotation = param.annotation
            if annotation is Config:
                kwargs[name] = self.get_config()
            elif annotation in self._instances or annotation in self._implementations:
                kwargs[name] = self.get(annotation)
            elif param.default is inspect.Parameter.empty:
                self._logger.warning(
                    f"{implementation.__name__}: no service for parameter {name} ({annotation})"
                )

        return implementation(**kwargs)

    def get_config(self) -> Config:
        """Get the configuration, loading it on first use."""
        if self._config is None:
            self._config = self._config_manager.get_config()
        return self._config

    def configure_default_services(self) -> None:
        """Bind every interface to its default implementation."""
        from ..core.services import (
            EnrichmentPipeline,
            ImageDownloadService,
            OMDbService,
            SqlWatchlistStore,
            TMDbService,
            WatchlistService,
        )

        app_config = self.get_config().app
        self.register_instance(
            TaskPool,
            TaskPool(max_workers=app_config.max_workers, queue_capacity=app_config.queue_capacity),
        )

        defaults: Dict[Type, Type] = {
            IOMDbService: OMDbService,
            ITMDbService: TMDbService,
            IImageDownloadService: ImageDownloadService,
            IWatchlistStore: SqlWatchlistStore,
            IEnrichmentPipeline: EnrichmentPipeline,
            IWatchlistService: WatchlistService,
        }
        for interface, implementation in defaults.items():
            self.register_singleton(interface, implementation)

        self._logger.info("Default services configured")

    async def close(self) -> None:
        """Close the HTTP sessions of services built so far."""
        for interface, instance in list(self._instances.items()):
            close = getattr(instance, "close", None)
            if close is not None and inspect.iscoroutinefunction(close):
                await close()
                self._logger.debug(f"Closed {interface.__name__}")

    def reset(self) -> None:
        """Forget all bindings, built services and the cached configuration."""
        self._implementations.clear()
        self._instances.clear()
        self._config = None
        self._logger.debug("Container reset")
