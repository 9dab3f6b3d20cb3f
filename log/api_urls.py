from .views import ChangeEventViewSet
from rest_framework.routers import DefaultRouter

router = DefaultRouter()
router.register(r'changes', ChangeEventViewSet, basename='change')

urlpatterns = router.urls
