"""
Addon descriptors and packages.

Every addon exposes a ModulePackage: its descriptor, the routes it
contributes, the components those routes render, optional menus and the
initialize/cleanup hooks the registry calls during the addon lifecycle.
Packages are plain values; once constructed they are never mutated.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple, Union

import yaml
from django.utils.module_loading import import_string

from .exceptions import InvalidModuleDescriptor


MANIFEST_NAMES = ('manifest.yaml', 'manifest.yml', 'manifest.json')


def _noop() -> None:
    pass


def _require_text(value: Any, what: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidModuleDescriptor(f"{what} must be a non-empty string, got {value!r}")
    return value


@dataclass(frozen=True)
class ModuleDescriptor:
    """Identity and declared capabilities of one addon."""

    name: str
    version: str = '1.0.0'
    display_label: str = ''
    summary: str = ''
    description: str = ''
    application: bool = True
    auto_install: bool = False
    installable: bool = True
    dependencies: Tuple[str, ...] = ()
    models: Tuple[str, ...] = ()

    def __post_init__(self):
        _require_text(self.name, 'Module name')
        if not isinstance(self.version, str):
            raise InvalidModuleDescriptor(
                f"Module '{self.name}' version must be a string, got {self.version!r}"
            )
        if not self.display_label:
            object.__setattr__(self, 'display_label', self.name)
        for attr in ('dependencies', 'models'):
            value = getattr(self, attr)
            if isinstance(value, str) or not isinstance(value, Iterable):
                raise InvalidModuleDescriptor(
                    f"Module '{self.name}' {attr} must be a list of names, got {value!r}"
                )
        # Manifests written by hand often carry [''] for "no dependencies"
        object.__setattr__(
            self, 'dependencies', tuple(dep for dep in self.dependencies if dep)
        )
        object.__setattr__(self, 'models', tuple(self.models))

    @classmethod
    def from_manifest_data(cls, data: Mapping[str, Any]) -> 'ModuleDescriptor':
        """
        Build a descriptor from the `module`/`metadata` sections of a manifest.

        A flat mapping (name, version, display_name, ... at the top level)
        is accepted as well.
        """
        if not isinstance(data, Mapping):
            raise InvalidModuleDescriptor(f"Manifest must be a mapping, got {type(data).__name__}")

        module = data.get('module') or data
        metadata = data.get('metadata') or data
        return cls(
            name=module.get('name', ''),
            version=str(module.get('version', '1.0.0')),
            display_label=metadata.get('display_name', ''),
            summary=metadata.get('summary', ''),
            description=metadata.get('description', ''),
            application=metadata.get('application', True),
            auto_install=metadata.get('auto_install', False),
            installable=metadata.get('installable', True),
            dependencies=data.get('dependencies') or (),
            models=data.get('models') or (),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'version': self.version,
            'display_label': self.display_label,
            'summary': self.summary,
            'description': self.description,
            'application': self.application,
            'auto_install': self.auto_install,
            'installable': self.installable,
            'dependencies': list(self.dependencies),
            'models': list(self.models),
        }


@dataclass(frozen=True)
class RouteEntry:
    """A path contributed by an addon and the component that renders it."""

    path: str
    view_id: str
    title: str = ''
    icon: Optional[str] = None
    protected: bool = True

    def __post_init__(self):
        _require_text(self.path, 'Route path')
        _require_text(self.view_id, f"View id of route '{self.path}'")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'RouteEntry':
        if not isinstance(data, Mapping):
            raise InvalidModuleDescriptor(f"Route definition must be a mapping, got {data!r}")
        return cls(
            path=data.get('path', ''),
            view_id=data.get('view', data.get('view_id', '')),
            title=data.get('title', ''),
            icon=data.get('icon'),
            protected=data.get('protected', True),
        )


@dataclass(frozen=True)
class MenuEntry:
    """A navigation entry; children are nested entries."""

    id: str
    name: str
    sequence: int = 100
    route: Optional[str] = None
    icon: Optional[str] = None
    parent: Optional[str] = None
    children: Tuple['MenuEntry', ...] = ()

    def __post_init__(self):
        _require_text(self.id, 'Menu id')
        object.__setattr__(self, 'children', tuple(self.children))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], parent: Optional[str] = None) -> 'MenuEntry':
        if not isinstance(data, Mapping):
            raise InvalidModuleDescriptor(f"Menu definition must be a mapping, got {data!r}")
        menu_id = data.get('id', '')
        return cls(
            id=menu_id,
            name=data.get('name', menu_id),
            sequence=int(data.get('sequence', 100)),
            route=data.get('route'),
            icon=data.get('icon'),
            parent=data.get('parent', parent),
            children=tuple(
                cls.from_dict(child, parent=menu_id) for child in data.get('children') or ()
            ),
        )


ComponentSource = Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]


def _freeze_components(module_name: str, components: ComponentSource) -> Mapping[str, Any]:
    """Copy components into a read-only mapping, rejecting repeated names."""
    items = components.items() if isinstance(components, Mapping) else components
    frozen: Dict[str, Any] = {}
    for key, ref in items:
        _require_text(key, f"Component name in module '{module_name}'")
        if key in frozen:
            raise InvalidModuleDescriptor(
                f"Module '{module_name}' declares component '{key}' more than once"
            )
        if ref is None:
            raise InvalidModuleDescriptor(
                f"Component '{key}' of module '{module_name}' has no reference"
            )
        frozen[key] = ref
    return MappingProxyType(frozen)


@dataclass(frozen=True)
class ModulePackage:
    """
    Everything one addon hands to the registry.

    `components` accepts either a mapping or an iterable of (name, ref)
    pairs; a name repeated within the same package is a construction error.
    """

    descriptor: ModuleDescriptor
    route_fragment: Tuple[RouteEntry, ...] = ()
    components: Mapping[str, Any] = field(default_factory=dict)
    initialize: Callable[[], None] = _noop
    cleanup: Callable[[], None] = _noop
    menus: Tuple[MenuEntry, ...] = ()

    def __post_init__(self):
        if not isinstance(self.descriptor, ModuleDescriptor):
            raise InvalidModuleDescriptor(
                f"Package descriptor must be a ModuleDescriptor, got {self.descriptor!r}"
            )
        name = self.descriptor.name

        routes = tuple(self.route_fragment)
        for route in routes:
            if not isinstance(route, RouteEntry):
                raise InvalidModuleDescriptor(f"Module '{name}' has an invalid route: {route!r}")
        menus = tuple(self.menus)
        for menu in menus:
            if not isinstance(menu, MenuEntry):
                raise InvalidModuleDescriptor(f"Module '{name}' has an invalid menu: {menu!r}")

        for hook_name in ('initialize', 'cleanup'):
            hook = getattr(self, hook_name)
            if hook is None:
                object.__setattr__(self, hook_name, _noop)
            elif not callable(hook):
                raise InvalidModuleDescriptor(f"Module '{name}' {hook_name} hook is not callable")

        object.__setattr__(self, 'route_fragment', routes)
        object.__setattr__(self, 'menus', menus)
        object.__setattr__(self, 'components', _freeze_components(name, self.components))

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def version(self) -> str:
        return self.descriptor.version

    @classmethod
    def from_manifest(cls,
                      manifest: Union[str, Path, Mapping[str, Any]],
                      initialize: Optional[Callable[[], None]] = None,
                      cleanup: Optional[Callable[[], None]] = None) -> 'ModulePackage':
        """
        Build a package from a manifest file (or already parsed manifest data).

        Component references are dotted import paths and are resolved here,
        so a package never holds an unresolved component.
        """
        data = load_manifest(manifest) if isinstance(manifest, (str, Path)) else manifest
        descriptor = ModuleDescriptor.from_manifest_data(data)

        components = []
        for entry in data.get('components') or ():
            if not isinstance(entry, Mapping):
                raise InvalidModuleDescriptor(
                    f"Component definition of module '{descriptor.name}' must be a mapping"
                )
            components.append((entry.get('name', ''), _resolve(descriptor.name, entry.get('view'))))

        return cls(
            descriptor=descriptor,
            route_fragment=tuple(RouteEntry.from_dict(r) for r in data.get('routes') or ()),
            components=components,
            initialize=initialize or _noop,
            cleanup=cleanup or _noop,
            menus=tuple(MenuEntry.from_dict(m) for m in data.get('menus') or ()),
        )


def _resolve(module_name: str, reference: Any) -> Any:
    if not isinstance(reference, str):
        return reference
    try:
        return import_string(reference)
    except ImportError as e:
        raise InvalidModuleDescriptor(
            f"Module '{module_name}' references unknown component '{reference}': {e}"
        ) from e


def load_manifest(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a manifest from a YAML or JSON file."""
    path = Path(path)
    try:
        if path.suffix in ('.yaml', '.yml'):
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        elif path.suffix == '.json':
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        else:
            raise InvalidModuleDescriptor(f"Unsupported manifest format: {path.suffix}")
    except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise InvalidModuleDescriptor(f"Cannot read manifest {path}: {e}") from e

    if not isinstance(data, dict):
        raise InvalidModuleDescriptor(f"Manifest {path} must contain a mapping")
    return data


def find_manifest(directory: Union[str, Path]) -> Optional[Path]:
    """Return the manifest file inside an addon directory, if any."""
    directory = Path(directory)
    for manifest_name in MANIFEST_NAMES:
        candidate = directory / manifest_name
        if candidate.exists():
            return candidate
    return None
