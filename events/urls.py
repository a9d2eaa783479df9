from rest_framework.routers import DefaultRouter

from .views import EventImageViewSet, EventViewSet

router = DefaultRouter(trailing_slash=False)
router.register(r"events", EventViewSet, basename="event")
router.register(r"event-images", EventImageViewSet, basename="eventimage")

urlpatterns = router.urls
