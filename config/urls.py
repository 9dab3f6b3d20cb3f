from django.contrib import admin
from django.urls import path, include, re_path
from rest_framework_simplejwt.views import TokenRefreshView
from user.views import getmeview

# drf-yasg imports for Swagger
from rest_framework import permissions
from drf_yasg.views import get_schema_view
from drf_yasg import openapi

schema_view = get_schema_view(
    openapi.Info(
        title="Restaurant POS API",
        default_version='v1',
        description="Menu, orders, kitchen and bar queues, bar inventory and reports",
    ),
    public=True,
    permission_classes=(permissions.AllowAny,),
)

urlpatterns = [
    path('admin/', admin.site.urls),

    # --- API URLs ---
    path('api/v1/', include('order.api_urls')),
    path('api/v1/', include('inventory.api_urls')),
    path('api/v1/', include('user.api_urls')),
    path('api/v1/', include('log.api_urls')),
    path('api/v1/getme/', getmeview, name='getme'),
    path('api/v1/auth/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    # Keep this for easy testing/login via the browser during development
    path('api-auth/', include('rest_framework.urls', namespace='rest_framework')),

    # Swagger and Redoc endpoints
    re_path(r'^swagger(?P<format>\.json|\.yaml)$', schema_view.without_ui(cache_timeout=0), name='schema-json'),
    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('redoc/', schema_view.with_ui('redoc', cache_timeout=0), name='schema-redoc'),
]
