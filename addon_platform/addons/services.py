"""
Addon service registration and discovery.

Addons register their service classes here from their initialize hook
and remove them from their cleanup hook, so other addons and views can
find a service without importing the addon that provides it.
"""

import logging
import threading
from typing import Any, Dict, Optional, Type

logger = logging.getLogger(__name__)


class ServiceRegistry:
    """
    Central registry for addon services.

    Service ids are namespaced by convention as "<addon>.<service>".
    """

    def __init__(self):
        self._services: Dict[str, Any] = {}
        self._service_metadata: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def register(self,
                 service_id: str,
                 service_class: Type[Any],
                 metadata: Optional[Dict[str, Any]] = None) -> None:
        """
        Register a service.

        Args:
            service_id: Unique identifier for the service
            service_class: Service class or factory
            metadata: Optional metadata about the service
        """
        with self._lock:
            if service_id in self._services:
                logger.warning(f"Service {service_id} already registered, overwriting")

            self._services[service_id] = service_class
            self._service_metadata[service_id] = metadata or {}

        logger.info(f"Registered service: {service_id}")

    def get(self, service_id: str) -> Optional[Any]:
        return self._services.get(service_id)

    def get_instance(self, service_id: str, *args, **kwargs) -> Optional[Any]:
        """
        Get an instance of a service, or None if it is not registered.
        """
        service_class = self.get(service_id)
        if service_class is None:
            return None
        try:
            return service_class(*args, **kwargs)
        except Exception as e:
            logger.error(f"Failed to instantiate service {service_id}: {e}")
            raise

    def list_services(self) -> Dict[str, Dict[str, Any]]:
        """
        List all registered services.

        Returns:
            Dictionary of service IDs to metadata
        """
        result = {}
        for service_id, service_class in list(self._services.items()):
            result[service_id] = {
                'class': f"{service_class.__module__}.{service_class.__qualname__}",
                'metadata': self._service_metadata.get(service_id, {}),
            }
        return result

    def unregister(self, service_id: str) -> bool:
        """
        Unregister a service.

        Returns:
            True if service was unregistered, False if not found
        """
        with self._lock:
            if service_id not in self._services:
                return False
            del self._services[service_id]
            del self._service_metadata[service_id]
        logger.info(f"Unregistered service: {service_id}")
        return True


# Shared by all addons of the process
service_registry = ServiceRegistry()
