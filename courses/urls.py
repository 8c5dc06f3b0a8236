from django.urls import re_path
from core.routers import OptionalSlashRouter
from .views import CourseViewSet, LessonViewSet, QuestionViewSet, MyEnrollmentsView

router = OptionalSlashRouter()
router.register(r'courses/lessons', LessonViewSet, basename='lesson')
router.register(r'courses/questions', QuestionViewSet, basename='question')
router.register(r'courses', CourseViewSet, basename='course')

urlpatterns = [
    re_path(r'^courses/enrollments/my/?$', MyEnrollmentsView.as_view(), name='my-enrollments'),
    *router.urls,
]
