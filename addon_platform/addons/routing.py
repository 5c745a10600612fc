"""
Mount addon routes into the Django URLconf.

Each mounted view looks its component up in the registry on every
request, so an unregistered module stops answering at once. Routes whose
component is missing still resolve, to a placeholder answering 404, so a
broken addon never breaks URL loading.

AddonRoutes keeps a URLconf list in step with the registry: it rebuilds
the addon patterns whenever a module is registered or unregistered and
clears Django's resolver caches.

The `protected` route flag is metadata for clients such as a frontend
router. The mounted views do not enforce it; each component applies its
own permission classes.
"""

import logging

from django.http import JsonResponse
from django.urls import clear_url_caches, path

from . import signals

logger = logging.getLogger(__name__)


def missing_component_view(request, *args, view_id=None, **kwargs):
    """Placeholder for a route whose component is not registered."""
    return JsonResponse(
        {'detail': f"Component '{view_id}' is not available", 'view_id': view_id},
        status=404,
    )


def as_view(component):
    """Turn a component reference into a Django view callable."""
    if hasattr(component, 'as_view'):
        return component.as_view()
    return component


def route_view(registry, view_id, fallback=missing_component_view):
    """Return a view dispatching to the component registered as `view_id`."""
    def view(request, *args, **kwargs):
        component = registry.get_component(view_id)
        if component is None:
            return fallback(request, *args, view_id=view_id, **kwargs)
        return as_view(component)(request, *args, **kwargs)

    view.view_id = view_id
    return view


def build_urlpatterns(registry, fallback=missing_component_view):
    """
    Build URL patterns for every route in the registry.

    Args:
        registry: The AddonRegistry to read routes and components from
        fallback: View used for routes whose component is missing; it
            receives the missing view id as the `view_id` keyword

    Returns:
        List of Django URL patterns, in route order
    """
    urlpatterns = []
    for route in registry.get_routes():
        if registry.get_component(route.view_id) is None:
            logger.warning(f"No component '{route.view_id}' for route '{route.path}'")
        view = route_view(registry, route.view_id, fallback)
        urlpatterns.append(path(route.path.lstrip('/'), view, name=route.view_id))
    return urlpatterns


class AddonRoutes:
    """
    Keep the addon patterns of a URLconf list in step with a registry.

    The patterns already in `urlpatterns` are kept in front; the addon
    patterns follow them and are replaced in place on every refresh.
    """

    def __init__(self, registry, urlpatterns, fallback=missing_component_view):
        self.registry = registry
        self.urlpatterns = urlpatterns
        self.fallback = fallback
        self._base = list(urlpatterns)

        signals.addon_registered.connect(self._on_change, weak=False)
        signals.addon_unregistered.connect(self._on_change, weak=False)
        self.refresh()

    def refresh(self):
        """Rebuild the addon patterns and drop cached resolvers."""
        self.urlpatterns[:] = self._base + build_urlpatterns(self.registry, self.fallback)
        clear_url_caches()
        logger.debug(f"Mounted {len(self.urlpatterns) - len(self._base)} addon routes")

    def disconnect(self):
        signals.addon_registered.disconnect(self._on_change)
        signals.addon_unregistered.disconnect(self._on_change)

    def _on_change(self, sender, registry, module_name, **kwargs):
        if registry is self.registry:
            self.refresh()
