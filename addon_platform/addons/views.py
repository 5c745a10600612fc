"""
Addon System Views
"""

from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.response import Response
from rest_framework.views import APIView

from .apps import get_registry
from .models import AddonRecord
from .serializers import (
    AddonRecordSerializer,
    MenuEntrySerializer,
    RegisteredModuleSerializer,
    RouteEntrySerializer,
)


class AddonRegistryView(APIView):
    """
    Registry overview: state and every registered addon.
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        registry = get_registry()
        serializer = RegisteredModuleSerializer(
            registry.get_all_modules(), many=True, context={'registry': registry}
        )
        return Response({
            'state': registry.state.value,
            'modules': serializer.data,
        })


class AddonRoutesView(APIView):
    """Merged routes of all addons, in registration order."""
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        routes = get_registry().get_routes()
        return Response(RouteEntrySerializer(routes, many=True).data)


class AddonMenusView(APIView):
    """Merged menus of all addons, ordered by sequence."""
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        menus = get_registry().get_menus()
        return Response(MenuEntrySerializer(menus, many=True).data)


class AddonComponentView(APIView):
    """Look up a component by name."""
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, name):
        registry = get_registry()
        component = registry.get_component(name)
        if component is None:
            raise NotFound(f"Component '{name}' is not registered")

        return Response({
            'name': name,
            'module': registry.get_component_owner(name),
            'reference': f"{component.__module__}.{getattr(component, '__qualname__', repr(component))}",
        })


class AddonHealthView(APIView):
    """
    Lifecycle health of every addon.

    The system is degraded as soon as one addon is not active.
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        registry = get_registry()
        module_health = registry.get_module_health()
        unhealthy_count = sum(
            1 for health in module_health.values() if health['status'] != 'active'
        )

        return Response({
            'status': 'degraded' if unhealthy_count else 'healthy',
            'registry_state': registry.state.value,
            'total_modules': len(module_health),
            'unhealthy_modules': unhealthy_count,
            'modules': module_health,
        })


class AddonRecordViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Stored addon records, looked up by addon name.
    """
    serializer_class = AddonRecordSerializer
    permission_classes = [permissions.IsAuthenticated]
    queryset = AddonRecord.objects.all()
    lookup_field = 'name'

    @action(detail=False, methods=['post'])
    def sync(self, request):
        """Write the current registry state to the addon records"""
        records = AddonRecord.objects.sync_from_registry(get_registry())
        serializer = self.get_serializer(records, many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)
