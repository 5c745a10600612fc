"""
Addon Registry

Collects addon packages, merges their routes, components and menus, and
sequences their initialize/cleanup hooks. One registry is owned by the
host application (see apps.AddonsConfig); it is an ordinary object so
tests and tools can build their own.
"""

import logging
import threading
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .base import MenuEntry, ModulePackage, RouteEntry
from .exceptions import (
    DuplicateComponentKey, DuplicateModuleName, InvalidModuleDescriptor, ModuleCleanupError,
    ModuleInitError, ModuleNotRegistered, RegistryShuttingDown, RegistryStateError,
)
from .lifecycle import CLEANUP, INITIALIZE, LifecycleResult, call_hook
from . import signals

logger = logging.getLogger(__name__)


class RegistryState(str, Enum):
    UNINITIALIZED = 'uninitialized'
    READY = 'ready'
    SHUTTING_DOWN = 'shutting_down'


class ModuleStatus(str, Enum):
    REGISTERED = 'registered'
    ACTIVE = 'active'
    FAILED = 'failed'
    CLEANED_UP = 'cleaned_up'


class AddonRegistry:
    """
    Registry of addon packages for one running application.

    Mutations (register, unregister, activate_all, deactivate_all) are
    serialized by a lock. Lifecycle hooks run outside it, so a hook may
    itself register modules or read the registry. Routes, components and
    menus are rebuilt into fresh immutable objects on every mutation and
    swapped in whole, so readers never take the lock.
    """

    def __init__(self, stop_on_first_failure: bool = False,
                 lifecycle_timeout: Optional[float] = None):
        self.stop_on_first_failure = stop_on_first_failure
        self.lifecycle_timeout = lifecycle_timeout

        self._lock = threading.RLock()
        self._state = RegistryState.UNINITIALIZED
        self._modules: Mapping[str, ModulePackage] = MappingProxyType({})
        self._routes: Tuple[RouteEntry, ...] = ()
        self._components: Mapping[str, Any] = MappingProxyType({})
        self._component_owners: Mapping[str, str] = MappingProxyType({})
        self._menus: Tuple[MenuEntry, ...] = ()

        self._activated: set = set()  # modules whose initialize was invoked
        self._unregistering: set = set()
        self._statuses: Dict[str, ModuleStatus] = {}
        self._errors: Dict[str, Exception] = {}

    @property
    def state(self) -> RegistryState:
        return self._state

    # Registration

    def register(self, package: ModulePackage) -> None:
        """
        Add a package after all previously registered ones.

        Does not call initialize. Either the package is merged completely
        or the registry is left untouched.

        Raises:
            RegistryShuttingDown: If deactivate_all has started
            DuplicateModuleName: If a module with this name is registered
            DuplicateComponentKey: If a component name is already taken
        """
        if not isinstance(package, ModulePackage):
            raise InvalidModuleDescriptor(f"Expected a ModulePackage, got {package!r}")

        with self._lock:
            self._ensure_not_shutting_down('register')
            name = package.name
            if name in self._modules:
                raise DuplicateModuleName(name)

            modules = dict(self._modules)
            modules[name] = package
            self._publish(modules)
            self._statuses[name] = ModuleStatus.REGISTERED

        logger.info(f"Registered addon: {name} v{package.version}")
        signals.addon_registered.send(sender=self.__class__, registry=self, module_name=name)

    def unregister(self, module_name: str) -> LifecycleResult:
        """
        Remove a module, calling its cleanup first if it was activated.

        The module is removed even if its cleanup fails; the failure is
        reported in the returned result.

        Raises:
            ModuleNotRegistered: If no module has this name
            RegistryShuttingDown: If deactivate_all has started
        """
        with self._lock:
            self._ensure_not_shutting_down('unregister')
            package = self._modules.get(module_name)
            if package is None or module_name in self._unregistering:
                raise ModuleNotRegistered(module_name)
            self._unregistering.add(module_name)
            activated = module_name in self._activated
            self._activated.discard(module_name)

        result = LifecycleResult(CLEANUP)
        if activated:
            self._run_cleanup(package, result)

        with self._lock:
            self._unregistering.discard(module_name)
            modules = dict(self._modules)
            del modules[module_name]
            self._publish(modules)
            self._statuses.pop(module_name, None)
            self._errors.pop(module_name, None)

        logger.info(f"Unregistered addon: {module_name}")
        signals.addon_unregistered.send(
            sender=self.__class__, registry=self, module_name=module_name
        )
        return result

    def _ensure_not_shutting_down(self, operation: str) -> None:
        if self._state is RegistryState.SHUTTING_DOWN:
            raise RegistryShuttingDown(f"Cannot {operation}: registry is shutting down")

    def _publish(self, modules: Dict[str, ModulePackage]) -> None:
        """
        Rebuild the derived tables from `modules` and swap them in.

        Raises DuplicateComponentKey before anything is assigned, which
        keeps a failed register() free of side effects.
        """
        routes: List[RouteEntry] = []
        components: Dict[str, Any] = {}
        owners: Dict[str, str] = {}
        menus: List[MenuEntry] = []

        for name, package in modules.items():
            collisions = {key: owners[key] for key in package.components if key in components}
            if collisions:
                raise DuplicateComponentKey(name, collisions)
            components.update(package.components)
            owners.update((key, name) for key in package.components)
            routes.extend(package.route_fragment)
            menus.extend(package.menus)

        self._modules = MappingProxyType(modules)
        self._routes = tuple(routes)
        self._components = MappingProxyType(components)
        self._component_owners = MappingProxyType(owners)
        # sorted() is stable, so equal sequences keep registration order
        self._menus = tuple(sorted(menus, key=lambda menu: menu.sequence))

    # Lifecycle

    def activate_all(self) -> LifecycleResult:
        """
        Move to READY and call every module's initialize in registration order.

        A failing initialize does not stop the sweep unless
        stop_on_first_failure is set, in which case the remaining modules
        are reported as skipped. The registry is READY afterwards either way.

        Raises:
            RegistryStateError: If the registry was already activated
            RegistryShuttingDown: If deactivate_all has started
        """
        with self._lock:
            self._ensure_not_shutting_down('activate')
            if self._state is RegistryState.READY:
                raise RegistryStateError("Registry is already active")
            self._state = RegistryState.READY
            packages = list(self._modules.values())

        result = LifecycleResult(INITIALIZE)
        for package in packages:
            if result.failures and self.stop_on_first_failure:
                result.skipped.append(package.name)
                continue
            self._run_initialize(package, result)

        if result.failures:
            logger.error(
                f"Addon activation finished with {len(result.failures)} failure(s): "
                f"{', '.join(result.failures)}"
            )
        else:
            logger.info(f"Activated {len(result.invoked)} addon(s)")
        return result

    def deactivate_all(self) -> LifecycleResult:
        """
        Move to SHUTTING_DOWN and call every module's cleanup in reverse
        registration order.

        Every cleanup is called even when earlier ones fail. Calling this
        again once shutting down returns an empty result.
        """
        with self._lock:
            if self._state is RegistryState.SHUTTING_DOWN:
                logger.warning("deactivate_all called on a registry that is already shutting down")
                return LifecycleResult(CLEANUP)
            self._state = RegistryState.SHUTTING_DOWN
            # modules being unregistered get their cleanup from unregister()
            packages = [
                package for name, package in self._modules.items()
                if name not in self._unregistering
            ]

        result = LifecycleResult(CLEANUP)
        for package in reversed(packages):
            self._run_cleanup(package, result)

        if result.failures:
            logger.error(
                f"Addon shutdown finished with {len(result.failures)} failure(s): "
                f"{', '.join(result.failures)}"
            )
        else:
            logger.info(f"Cleaned up {len(result.invoked)} addon(s)")
        return result

    def _run_initialize(self, package: ModulePackage, result: LifecycleResult) -> None:
        name = package.name
        with self._lock:
            # unregistered since activate_all took its snapshot
            if self._modules.get(name) is not package or name in self._unregistering:
                return
            self._activated.add(name)
        result.invoked.append(name)
        try:
            call_hook(package.initialize, self.lifecycle_timeout)
        except Exception as e:
            error = ModuleInitError(name, e)
            result.failures[name] = error
            with self._lock:
                if name in self._activated:
                    self._statuses[name] = ModuleStatus.FAILED
                    self._errors[name] = error
            logger.error(f"Failed to initialize addon {name}: {e}", exc_info=True)
            signals.addon_initialize_failed.send(
                sender=self.__class__, registry=self, module_name=name, error=error
            )
        else:
            with self._lock:
                if name in self._activated:
                    self._statuses[name] = ModuleStatus.ACTIVE
            logger.debug(f"Initialized addon {name}")
            signals.addon_initialized.send(sender=self.__class__, registry=self, module_name=name)

    def _run_cleanup(self, package: ModulePackage, result: LifecycleResult) -> None:
        name = package.name
        result.invoked.append(name)
        try:
            call_hook(package.cleanup, self.lifecycle_timeout)
        except Exception as e:
            error = ModuleCleanupError(name, e)
            result.failures[name] = error
            self._errors[name] = error
            logger.error(f"Error cleaning up addon {name}: {e}", exc_info=True)
            signals.addon_cleanup_failed.send(
                sender=self.__class__, registry=self, module_name=name, error=error
            )
        else:
            logger.debug(f"Cleaned up addon {name}")
            signals.addon_cleaned_up.send(sender=self.__class__, registry=self, module_name=name)
        self._statuses[name] = ModuleStatus.CLEANED_UP

    # Lookups

    def get_routes(self) -> Tuple[RouteEntry, ...]:
        """All routes, module by module in registration order."""
        return self._routes

    def get_component(self, name: str) -> Optional[Any]:
        """Component registered under `name`, or None."""
        return self._components.get(name)

    def get_component_owner(self, name: str) -> Optional[str]:
        return self._component_owners.get(name)

    def get_components(self) -> Mapping[str, Any]:
        return self._components

    def get_menus(self) -> Tuple[MenuEntry, ...]:
        """Top-level menus of all modules ordered by sequence."""
        return self._menus

    def get_module(self, module_name: str) -> Optional[ModulePackage]:
        return self._modules.get(module_name)

    def get_all_modules(self) -> List[ModulePackage]:
        return list(self._modules.values())

    def module_status(self, module_name: str) -> Optional[ModuleStatus]:
        return self._statuses.get(module_name)

    def module_error(self, module_name: str) -> Optional[Exception]:
        """Last lifecycle error recorded for a module."""
        return self._errors.get(module_name)

    def get_module_health(self) -> Dict[str, Dict[str, Any]]:
        """
        Get lifecycle status of all modules.

        Returns:
            Dictionary mapping module names to status information
        """
        health_status = {}
        for name, package in self._modules.items():
            status = self._statuses.get(name, ModuleStatus.REGISTERED)
            error = self._errors.get(name)
            health_status[name] = {
                'status': status.value,
                'version': package.version,
                'error': str(error) if error else None,
            }
        return health_status

    def check_consistency(self) -> List[str]:
        """
        Verify merged components against the registered packages.

        Returns:
            List of problems, empty when every package component is merged
            exactly once and nothing else is present
        """
        problems = []
        expected: Dict[str, str] = {}
        for name, package in self._modules.items():
            for key in package.components:
                if key in expected:
                    problems.append(
                        f"Component '{key}' provided by both '{expected[key]}' and '{name}'"
                    )
                expected[key] = name

        for key, name in expected.items():
            if key not in self._components:
                problems.append(f"Component '{key}' of '{name}' is missing")
            elif self._components[key] is not self._modules[name].components[key]:
                problems.append(f"Component '{key}' does not belong to '{name}'")
        for key in self._components:
            if key not in expected:
                problems.append(f"Component '{key}' has no providing module")
        return problems

    def __len__(self) -> int:
        return len(self._modules)

    def __contains__(self, module_name: str) -> bool:
        return module_name in self._modules
