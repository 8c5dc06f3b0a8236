from core.routers import OptionalSlashRouter
from .views import WebinarViewSet

router = OptionalSlashRouter()
router.register(r"webinars", WebinarViewSet, basename="webinar")

urlpatterns = router.urls
