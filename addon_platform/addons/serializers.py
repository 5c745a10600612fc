"""
Addon System Serializers
"""

from rest_framework import serializers
from .models import AddonRecord


class ModuleDescriptorSerializer(serializers.Serializer):
    """Serializer for registered module descriptors"""

    name = serializers.CharField()
    version = serializers.CharField()
    display_label = serializers.CharField()
    summary = serializers.CharField()
    description = serializers.CharField()
    application = serializers.BooleanField()
    auto_install = serializers.BooleanField()
    installable = serializers.BooleanField()
    dependencies = serializers.ListField(child=serializers.CharField())
    models = serializers.ListField(child=serializers.CharField())


class RouteEntrySerializer(serializers.Serializer):
    """Serializer for merged addon routes"""

    path = serializers.CharField()
    view_id = serializers.CharField()
    title = serializers.CharField()
    icon = serializers.CharField(allow_null=True)
    protected = serializers.BooleanField()


class MenuEntrySerializer(serializers.Serializer):
    """Serializer for addon menus, children included"""

    id = serializers.CharField()
    name = serializers.CharField()
    sequence = serializers.IntegerField()
    route = serializers.CharField(allow_null=True)
    icon = serializers.CharField(allow_null=True)
    parent = serializers.CharField(allow_null=True)
    children = serializers.SerializerMethodField()

    def get_children(self, obj):
        children = sorted(obj.children, key=lambda child: child.sequence)
        return MenuEntrySerializer(children, many=True).data


class RegisteredModuleSerializer(serializers.Serializer):
    """A registered package with its lifecycle status"""

    descriptor = ModuleDescriptorSerializer()
    status = serializers.SerializerMethodField()
    routes = RouteEntrySerializer(source='route_fragment', many=True)
    components = serializers.SerializerMethodField()

    def get_status(self, obj):
        status = self.context['registry'].module_status(obj.name)
        return status.value if status else None

    def get_components(self, obj):
        return list(obj.components)


class AddonRecordSerializer(serializers.ModelSerializer):
    """Serializer for stored addon records"""

    class Meta:
        model = AddonRecord
        fields = [
            'id', 'name', 'display_label', 'version', 'summary', 'description',
            'application', 'auto_install', 'installable', 'dependencies',
            'model_names', 'active', 'installed', 'status', 'last_error',
            'installed_at', 'created_at', 'updated_at',
        ]
        read_only_fields = fields
