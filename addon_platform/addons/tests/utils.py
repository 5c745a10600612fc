"""
Helpers for building addon packages in tests
"""

from addon_platform.addons.base import MenuEntry, ModuleDescriptor, ModulePackage, RouteEntry


def make_package(name, components=(), routes=(), menus=(), initialize=None, cleanup=None,
                 **descriptor_fields):
    """
    Build a package whose components all map to a distinct stub.

    `components` is a list of names; `routes` a list of (path, view_id) pairs.
    """
    return ModulePackage(
        descriptor=ModuleDescriptor(name=name, **descriptor_fields),
        route_fragment=tuple(RouteEntry(path=path, view_id=view_id) for path, view_id in routes),
        components=[(key, _stub_for(name, key)) for key in components],
        initialize=initialize,
        cleanup=cleanup,
        menus=tuple(menus),
    )


def make_menu(menu_id, sequence=100, **kwargs):
    return MenuEntry(id=menu_id, name=menu_id.title(), sequence=sequence, **kwargs)


class HookRecorder:
    """Collects hook invocations in call order"""

    def __init__(self):
        self.calls = []

    def hook(self, phase, name, error=None):
        def _hook():
            self.calls.append((phase, name))
            if error is not None:
                raise error
        return _hook


def _stub_for(module_name, key):
    def component(request, *args, **kwargs):
        return None
    component.__name__ = key
    component.__qualname__ = f"{module_name}.{key}"
    return component
