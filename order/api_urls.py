# order/api_urls.py
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views
from .api_stats import DashboardStatsView
from .api_reports import SalesReportView, SalesReportExportView

router = DefaultRouter()
router.register(r'orders', views.OrderViewSet, basename='order')
router.register(r'menuitems', views.MenuItemViewSet, basename='menuitem')
router.register(r'orderitems', views.OrderItemViewSet, basename='orderitem')


urlpatterns = [
    path('', include(router.urls)),
    path('kitchen/queue/', views.KitchenQueueView.as_view(), name='kitchen_queue'),
    path('bar/queue/', views.BarQueueView.as_view(), name='bar_queue'),
    path('stats/dashboard/', DashboardStatsView.as_view(), name='dashboard_stats'),
    path('reports/sales/', SalesReportView.as_view(), name='sales_report'),
    path('reports/sales/export/', SalesReportExportView.as_view(), name='sales_report_export'),
]
