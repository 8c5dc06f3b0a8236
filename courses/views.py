import logging
from rest_framework import viewsets, generics, status
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from admin_panel.permissions import IsInstructorOrAdmin, IsOwnerInstructorOrAdmin
from core.exceptions import PreconditionFailed
from core.mixins import EnvelopeDestroyMixin
from core.responses import send_response
from . import services
from .models import Course, Lesson, Question, Enrollment
from .serializers import (
    CourseSerializer, CourseWithLessonsSerializer, LessonSerializer,
    QuestionSerializer, EnrollmentSerializer,
)

logger = logging.getLogger(__name__)


class CourseViewSet(EnvelopeDestroyMixin, viewsets.ModelViewSet):
    serializer_class = CourseSerializer
    lookup_value_regex = r'\d+'

    def get_queryset(self):
        queryset = Course.objects.select_related('instructor').prefetch_related('lessons__questions')
        user = self.request.user
        if not (user.is_authenticated and (user.is_admin_role or user.is_instructor_role)):
            queryset = queryset.filter(is_published=True)
        return queryset

    def get_serializer_class(self):
        if self.action == 'retrieve':
            return CourseWithLessonsSerializer
        return CourseSerializer

    def get_permissions(self):
        if self.action in ["list", "retrieve"]:
            return [AllowAny()]
        if self.action == "enroll":
            return [IsAuthenticated()]
        return [IsAuthenticated(), IsInstructorOrAdmin(), IsOwnerInstructorOrAdmin()]

    def perform_create(self, serializer):
        serializer.save(instructor=self.request.user)

    @action(detail=True, methods=['post'])
    def enroll(self, request, pk=None):
        course = self.get_object()
        enrollment, created = services.enroll(request.user, course)
        return send_response(
            EnrollmentSerializer(enrollment).data,
            "Enrolled successfully" if created else "Already enrolled",
            status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class LessonViewSet(EnvelopeDestroyMixin, viewsets.ModelViewSet):
    queryset = Lesson.objects.select_related('course').prefetch_related('questions')
    serializer_class = LessonSerializer
    lookup_value_regex = r'\d+'

    def get_permissions(self):
        if self.action in ["list", "retrieve", "complete"]:
            return [IsAuthenticated()]
        return [IsAuthenticated(), IsInstructorOrAdmin()]

    def get_queryset(self):
        qs = super().get_queryset()
        course_id = self.request.query_params.get("course")
        if course_id:
            qs = qs.filter(course_id=course_id)
        return qs

    def _check_course_owner(self, course):
        user = self.request.user
        if not user.is_admin_role and course.instructor_id != user.id:
            raise PermissionDenied("You do not own this course")

    def perform_create(self, serializer):
        self._check_course_owner(serializer.validated_data['course'])
        serializer.save()

    def perform_update(self, serializer):
        self._check_course_owner(serializer.instance.course)
        if 'course' in serializer.validated_data:
            self._check_course_owner(serializer.validated_data['course'])
        serializer.save()

    def perform_destroy(self, instance):
        self._check_course_owner(instance.course)
        instance.delete()

    @action(detail=True, methods=['post'])
    def complete(self, request, pk=None):
        lesson = self.get_object()
        if lesson.lesson_type == Lesson.TYPE_QUIZ:
            raise ValidationError("Quiz lessons are completed by passing the quiz")

        enrollment = services.mark_lesson_completed(request.user, lesson)
        if enrollment is None:
            raise PreconditionFailed("You are not enrolled in this course")
        return send_response(EnrollmentSerializer(enrollment).data, "Lesson completed")


class QuestionViewSet(EnvelopeDestroyMixin, viewsets.ModelViewSet):
    queryset = Question.objects.select_related('lesson__course')
    serializer_class = QuestionSerializer
    permission_classes = [IsAuthenticated, IsInstructorOrAdmin]
    lookup_value_regex = r'\d+'
    filterset_fields = ['lesson', 'question_type']

    def get_queryset(self):
        queryset = super().get_queryset()
        user = self.request.user
        if not user.is_admin_role:
            queryset = queryset.filter(lesson__course__instructor=user)
        return queryset

    def _check_course_owner(self, lesson):
        user = self.request.user
        if not user.is_admin_role and lesson.course.instructor_id != user.id:
            raise PermissionDenied("You do not own this course")

    def perform_create(self, serializer):
        self._check_course_owner(serializer.validated_data['lesson'])
        serializer.save()

    def perform_update(self, serializer):
        self._check_course_owner(serializer.instance.lesson)
        if 'lesson' in serializer.validated_data:
            self._check_course_owner(serializer.validated_data['lesson'])
        serializer.save()

    def perform_destroy(self, instance):
        self._check_course_owner(instance.lesson)
        instance.delete()


class MyEnrollmentsView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = EnrollmentSerializer

    def get_queryset(self):
        return Enrollment.objects.filter(student=self.request.user).select_related('course')

    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_queryset(), many=True)
        return send_response(serializer.data, "Enrollments fetched")
