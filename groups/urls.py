# groups/urls.py
from rest_framework.routers import DefaultRouter

from .views import GroupImageViewSet, GroupViewSet

router = DefaultRouter(trailing_slash=False)
router.register(r"groups", GroupViewSet, basename="group")
router.register(r"group-images", GroupImageViewSet, basename="groupimage")

urlpatterns = router.urls
