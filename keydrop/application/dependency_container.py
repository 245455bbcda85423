"""
Dependency Injection Container

Holds the services wired up by the application factory and hands them to
API routes and Celery tasks through ``app.container``.
"""

import logging
import threading
from typing import Any, Dict, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DependencyNotFoundError(LookupError):
    """Raised when resolving a type nothing was registered for."""


class DependencyContainer:
    """
    Type-keyed registry of shared service instances.

    Overrides shadow registrations until clear_overrides() and are meant
    for tests.
    """

    def __init__(self):
        self._services: Dict[Type, Any] = {}
        self._overrides: Dict[Type, Any] = {}
        self._lock = threading.Lock()

    def register_singleton(self, interface: Type[T], instance: T) -> None:
        with self._lock:
            replaced = interface in self._services
            self._services[interface] = instance
        logger.debug(f"{'Replaced' if replaced else 'Registered'} {interface.__name__}")

    def override(self, interface: Type[T], instance: T) -> None:
        with self._lock:
            self._overrides[interface] = instance

    def clear_overrides(self) -> None:
        with self._lock:
            self._overrides.clear()

    def resolve(self, interface: Type[T]) -> T:
        """
        Raises:
            DependencyNotFoundError: If the type is not registered
        """
        with self._lock:
            if interface in self._overrides:
                return self._overrides[interface]
            if interface in self._services:
                return self._services[interface]
        raise DependencyNotFoundError(f"Nothing registered for {interface.__name__}")

    def is_registered(self, interface: Type) -> bool:
        with self._lock:
            return interface in self._overrides or interface in self._services

    def __len__(self) -> int:
        with self._lock:
            return len(self._services)
