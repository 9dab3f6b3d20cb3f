# user/api_urls.py
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views
from .api_stats import WaiterStatsView

router = DefaultRouter()
router.register(r'users', views.UserViewSet, basename='user')

urlpatterns = [
    path('', include(router.urls)),
    path('user-stats/', WaiterStatsView.as_view(), name='user-stats'),
    path('register/', views.RegisterAPIView.as_view(), name='register'),
    path('login/', views.EmailPasswordJWTLoginAPIView.as_view(), name='login'),
    path('pin-login/', views.PinLoginAPIView.as_view(), name='pin-login'),
    path('logout/', views.LogoutAPIView.as_view(), name='logout'),
    path('change-password/', views.ChangePasswordView.as_view(), name='change-password'),
]
