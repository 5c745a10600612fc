"""
Addon loader for discovering and importing addon packages.

Addons are found in three places: dotted package names listed in the
ADDONS setting, addon directories under the configured search paths,
and distributions exposing the addon entry point group.
"""

import importlib
import logging
import sys
from importlib.metadata import entry_points
from pathlib import Path
from types import ModuleType
from typing import Dict, Iterable, List, Optional

from .base import (
    MenuEntry, ModuleDescriptor, ModulePackage, RouteEntry, find_manifest, load_manifest,
)
from .exceptions import InvalidModuleDescriptor


logger = logging.getLogger(__name__)


class AddonLoader:
    """
    Loads addon packages from settings, search paths and entry points.

    Failures to load one addon are recorded in `errors` and never stop
    the other addons from loading.
    """

    def __init__(self,
                 packages: Iterable[str] = (),
                 search_paths: Iterable = (),
                 entry_point_group: Optional[str] = None):
        self.packages: List[str] = list(packages)
        self.search_paths: List[Path] = []
        self.entry_point_group = entry_point_group
        self.errors: Dict[str, Exception] = {}

        for path in search_paths:
            self.add_search_path(path)

    @classmethod
    def from_settings(cls, addon_settings: Dict) -> 'AddonLoader':
        return cls(
            packages=addon_settings['PACKAGES'],
            search_paths=addon_settings['PATHS'],
            entry_point_group=addon_settings['ENTRY_POINT_GROUP'],
        )

    def add_search_path(self, path) -> None:
        """
        Add a directory to search for addons.

        The directory is put on sys.path so its addons import by their
        directory name.
        """
        path_obj = Path(path).resolve()
        if path_obj.exists() and path_obj.is_dir():
            if path_obj not in self.search_paths:
                self.search_paths.append(path_obj)
                if str(path_obj) not in sys.path:
                    sys.path.insert(0, str(path_obj))
        else:
            logger.warning(f"Addon search path does not exist: {path}")

    # Discovery

    def discover(self) -> List[str]:
        """
        Return dotted names of all addons, without duplicates.

        Configured packages come first, then search path addons in
        directory-name order, then entry points.
        """
        discovered: List[str] = []
        for name in self.packages + self._discover_path_addons() + self._discover_entry_points():
            if name not in discovered:
                discovered.append(name)
        return discovered

    def _discover_path_addons(self) -> List[str]:
        discovered = []
        for search_path in self.search_paths:
            for item in sorted(search_path.iterdir()):
                if not item.is_dir() or item.name.startswith(('.', '_')):
                    continue
                if find_manifest(item) and (item / '__init__.py').exists():
                    discovered.append(item.name)
                    logger.debug(f"Discovered addon {item.name} at {item}")
        return discovered

    def _discover_entry_points(self) -> List[str]:
        if not self.entry_point_group:
            return []
        try:
            group = entry_points(group=self.entry_point_group)
        except Exception as e:
            self.errors[f"entry_points:{self.entry_point_group}"] = e
            logger.error(
                f"Failed to read addon entry points '{self.entry_point_group}': {e}",
                exc_info=True
            )
            return []

        discovered = []
        for ep in group:
            discovered.append(ep.value.split(':')[0])
            logger.debug(f"Discovered addon entry point {ep.name} -> {ep.value}")
        return discovered

    # Loading

    def load_package(self, dotted_name: str) -> ModulePackage:
        """
        Import an addon and return its ModulePackage.

        The addon either exports `package`, or the conventional names
        `manifest`, `routes`, `components`, `menus`, `initialize` and
        `cleanup` from which a package is assembled.

        Raises:
            ImportError: If the addon cannot be imported
            InvalidModuleDescriptor: If the addon does not export a valid package
        """
        module = importlib.import_module(dotted_name)

        package = getattr(module, 'package', None)
        if package is not None:
            if not isinstance(package, ModulePackage):
                raise InvalidModuleDescriptor(
                    f"{dotted_name}.package is not a ModulePackage: {package!r}"
                )
            return package

        return self._assemble(dotted_name, module)

    def _assemble(self, dotted_name: str, module: ModuleType) -> ModulePackage:
        manifest = getattr(module, 'manifest', None)
        if manifest is None:
            manifest_path = find_manifest(Path(module.__file__).parent)
            if manifest_path is None:
                raise InvalidModuleDescriptor(
                    f"Addon {dotted_name} exports neither 'package' nor 'manifest'"
                )
            manifest = manifest_path
        if isinstance(manifest, (str, Path)):
            manifest = load_manifest(manifest)

        if isinstance(manifest, ModuleDescriptor):
            descriptor_package = ModulePackage(descriptor=manifest)
        else:
            descriptor_package = ModulePackage.from_manifest(manifest)

        routes = getattr(module, 'routes', None)
        menus = getattr(module, 'menus', None)
        components = getattr(module, 'components', None)
        return ModulePackage(
            descriptor=descriptor_package.descriptor,
            route_fragment=(
                _coerce(routes, RouteEntry) if routes is not None
                else descriptor_package.route_fragment
            ),
            components=components if components is not None else descriptor_package.components,
            initialize=getattr(module, 'initialize', None),
            cleanup=getattr(module, 'cleanup', None),
            menus=_coerce(menus, MenuEntry) if menus is not None else descriptor_package.menus,
        )

    def load_all(self) -> List[ModulePackage]:
        """
        Discover and load all available addons.

        Returns:
            Loaded packages with dependencies before their dependents
        """
        self.errors = {}
        packages: List[ModulePackage] = []
        # discover() records entry point failures, so reset errors first
        for dotted_name in self.discover():
            try:
                packages.append(self.load_package(dotted_name))
            except Exception as e:
                self.errors[dotted_name] = e
                logger.error(f"Failed to load addon '{dotted_name}': {e}", exc_info=True)

        return self._sort_by_dependencies(self._drop_unsatisfied(packages))

    def _drop_unsatisfied(self, packages: List[ModulePackage]) -> List[ModulePackage]:
        """Drop packages with missing dependencies until none are left."""
        while True:
            available = {package.name for package in packages}
            kept = []
            for package in packages:
                missing = [dep for dep in package.descriptor.dependencies if dep not in available]
                if missing:
                    logger.warning(
                        f"Skipping addon '{package.name}' due to missing dependencies: "
                        f"{', '.join(missing)}"
                    )
                else:
                    kept.append(package)
            if len(kept) == len(packages):
                return kept
            packages = kept

    def _sort_by_dependencies(self, packages: List[ModulePackage]) -> List[ModulePackage]:
        """
        Sort packages by dependencies using topological sort.

        Returns:
            Sorted list with dependencies before dependents
        """
        package_map = {package.name: package for package in packages}

        graph: Dict[str, List[str]] = {name: [] for name in package_map}
        in_degree: Dict[str, int] = {name: 0 for name in package_map}

        for package in packages:
            for dep in package.descriptor.dependencies:
                if dep in graph:
                    graph[dep].append(package.name)
                    in_degree[package.name] += 1

        queue = [name for name in package_map if in_degree[name] == 0]
        sorted_names = []

        while queue:
            name = queue.pop(0)
            sorted_names.append(name)

            for dependent in graph[name]:
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0:
                    queue.append(dependent)

        if len(sorted_names) != len(packages):
            logger.warning("Circular dependencies detected in addons")
            return packages

        return [package_map[name] for name in sorted_names]


def _coerce(entries, entry_class):
    """Accept entry objects or plain dicts for routes and menus."""
    return tuple(
        entry if isinstance(entry, entry_class) else entry_class.from_dict(entry)
        for entry in entries
    )
