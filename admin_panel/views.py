import logging
from django.db.models import Count, Q
from django.utils import timezone
from rest_framework import viewsets, mixins
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from core.responses import send_response
from students.models import CustomUser
from courses.models import Course, Enrollment
from certificates.models import Certificate
from quizzes.models import QuizAttempt
from webinars.models import Webinar, WebinarRegistration
from .models import Notification
from .permissions import IsAdminRole
from .serializers import NotificationSerializer, DashboardStatsSerializer

logger = logging.getLogger(__name__)


def pass_rate(passed, total):
    return round(passed / total * 100, 1) if total else 0.0


class DashboardViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated, IsAdminRole]

    @action(detail=False, methods=['get'])
    def stats(self, request):
        """Platform-wide counters for the admin dashboard"""
        now = timezone.now()
        month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

        users = CustomUser.objects.filter(is_active=True).aggregate(
            students=Count('id', filter=Q(role=CustomUser.ROLE_STUDENT)),
            instructors=Count('id', filter=Q(role=CustomUser.ROLE_INSTRUCTOR)),
        )
        courses = Course.objects.aggregate(
            total=Count('id'),
            published=Count('id', filter=Q(is_published=True)),
        )
        enrollments = Enrollment.objects.aggregate(
            total=Count('id'),
            completed=Count('id', filter=Q(status=Enrollment.STATUS_COMPLETED)),
        )
        certificates = Certificate.objects.filter(status=Certificate.STATUS_ACTIVE).aggregate(
            total=Count('id'),
            this_month=Count('id', filter=Q(issue_date__gte=month_start)),
        )
        attempts = QuizAttempt.objects.aggregate(
            total=Count('id'),
            passed=Count('id', filter=Q(passed=True)),
        )

        stats_data = {
            'total_students': users['students'],
            'total_instructors': users['instructors'],
            'total_courses': courses['total'],
            'published_courses': courses['published'],
            'total_enrollments': enrollments['total'],
            'completed_enrollments': enrollments['completed'],
            'total_certificates': certificates['total'],
            'certificates_this_month': certificates['this_month'],
            'total_quiz_attempts': attempts['total'],
            'quiz_pass_rate': pass_rate(attempts['passed'], attempts['total']),
            'upcoming_webinars': Webinar.objects.filter(
                status=Webinar.STATUS_UPCOMING, scheduled_at__gte=now
            ).count(),
            'webinar_registrations': WebinarRegistration.objects.count(),
        }

        return send_response(DashboardStatsSerializer(stats_data).data, "Dashboard stats fetched")


class NotificationViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """Notifications addressed to the current user; ?unread=true narrows the list"""
    serializer_class = NotificationSerializer
    permission_classes = [IsAuthenticated]
    lookup_value_regex = r'\d+'

    def get_queryset(self):
        queryset = Notification.objects.filter(recipient=self.request.user)
        if self.action == 'list' and self.request.query_params.get('unread', '').lower() in ('true', '1'):
            queryset = queryset.filter(is_read=False)
        return queryset

    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_queryset(), many=True)
        return send_response(serializer.data, "Notifications fetched")

    @action(detail=True, methods=['post'], url_path='read')
    def mark_read(self, request, pk=None):
        notification = self.get_object()
        if not notification.is_read:
            notification.is_read = True
            notification.read_at = timezone.now()
            notification.save(update_fields=['is_read', 'read_at'])
        return send_response(self.get_serializer(notification).data, "Notification marked as read")

    @action(detail=False, methods=['post'], url_path='read-all')
    def mark_all_read(self, request):
        updated = self.get_queryset().filter(is_read=False).update(is_read=True, read_at=timezone.now())
        logger.debug(f"{request.user.email} marked {updated} notifications read")
        return send_response({'updated': updated}, "All notifications marked as read")

    @action(detail=False, methods=['get'], url_path='unread-count')
    def unread_count(self, request):
        count = self.get_queryset().filter(is_read=False).count()
        return send_response({'count': count}, "Unread count fetched")
