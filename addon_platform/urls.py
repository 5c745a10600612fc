from django.contrib import admin
from django.urls import path, include

from addon_platform.addons.apps import get_registry
from addon_platform.addons.routing import AddonRoutes

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/addons/', include('addon_platform.addons.urls')),
]

# Routes contributed by addons, e.g. crm/contacts/, follow the fixed routes
addon_routes = AddonRoutes(get_registry(), urlpatterns)
