# inventory/api_urls.py
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

router = DefaultRouter()
router.register(r'inventory', views.InventoryViewSet, basename='inventory')
router.register(r'inventory-usage', views.InventoryUsageViewSet, basename='inventoryusage')

urlpatterns = [
    path('', include(router.urls)),
]
