"""
Addon System URLs
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    AddonComponentView,
    AddonHealthView,
    AddonMenusView,
    AddonRecordViewSet,
    AddonRegistryView,
    AddonRoutesView,
)

app_name = 'addons'

router = DefaultRouter()
router.register('records', AddonRecordViewSet, basename='record')

urlpatterns = [
    path('', include(router.urls)),
    path('registry/', AddonRegistryView.as_view(), name='registry'),
    path('routes/', AddonRoutesView.as_view(), name='routes'),
    path('menus/', AddonMenusView.as_view(), name='menus'),
    path('components/<str:name>/', AddonComponentView.as_view(), name='component'),
    path('health/', AddonHealthView.as_view(), name='health'),
]
