"""
Platform Addon System.

Addons are feature packages (CRM, HR, Inventory, ...) that contribute
routes, view components and menus to the platform, plus initialize and
cleanup hooks the platform calls at startup and shutdown.

Key components:
- ModuleDescriptor / ModulePackage: what an addon hands to the platform
- AddonRegistry: merges packages and sequences their lifecycle
- AddonLoader: finds and imports addon packages

Usage:
    from addon_platform.addons.apps import get_registry

    registry = get_registry()
    view = registry.get_component('EmployeesView')
"""

from .base import MenuEntry, ModuleDescriptor, ModulePackage, RouteEntry
from .loader import AddonLoader
from .registry import AddonRegistry, ModuleStatus, RegistryState

__all__ = [
    'MenuEntry',
    'ModuleDescriptor',
    'ModulePackage',
    'RouteEntry',
    'AddonLoader',
    'AddonRegistry',
    'ModuleStatus',
    'RegistryState',
]
