from core.routers import OptionalSlashRouter
from .views import DashboardViewSet, NotificationViewSet

router = OptionalSlashRouter()
router.register(r'admin-panel/dashboard', DashboardViewSet, basename='dashboard')
router.register(r'notifications', NotificationViewSet, basename='notifications')

urlpatterns = router.urls
