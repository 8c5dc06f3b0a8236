from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from admin_panel.permissions import IsAdminRole, IsInstructorOrAdmin, IsOwnerInstructorOrAdmin
from core.mixins import EnvelopeDestroyMixin
from core.responses import send_response
from . import services
from .filters import WebinarFilter
from .models import Webinar
from .serializers import WebinarSerializer


class WebinarViewSet(EnvelopeDestroyMixin, viewsets.ModelViewSet):
    queryset = Webinar.objects.select_related('instructor').order_by('scheduled_at')
    serializer_class = WebinarSerializer
    filterset_class = WebinarFilter
    lookup_value_regex = r'\d+'

    def get_permissions(self):
        if self.action in ["list", "retrieve", "upcoming"]:
            return [AllowAny()]
        if self.action == "create":
            return [IsAuthenticated(), IsInstructorOrAdmin()]
        if self.action == "destroy":
            return [IsAuthenticated(), IsAdminRole()]
        if self.action == "register":
            return [IsAuthenticated()]
        return [IsAuthenticated(), IsInstructorOrAdmin(), IsOwnerInstructorOrAdmin()]

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        serializer = self.get_serializer(queryset, many=True)
        return send_response(serializer.data, "Webinars fetched")

    def retrieve(self, request, *args, **kwargs):
        webinar = services.get_webinar(kwargs['pk'])
        return send_response(self.get_serializer(webinar).data, "Webinar fetched")

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        webinar = services.create_webinar(request.user, serializer.validated_data)
        return send_response(self.get_serializer(webinar).data, "Webinar created", status.HTTP_201_CREATED)

    def perform_destroy(self, instance):
        services.delete_webinar(instance)

    @action(detail=False, methods=['get'])
    def upcoming(self, request):
        serializer = self.get_serializer(services.upcoming_webinars(), many=True)
        return send_response(serializer.data, "Upcoming webinars fetched")

    @action(detail=True, methods=['post'])
    def register(self, request, pk=None):
        webinar, created = services.register_for_webinar(pk, request.user)
        return send_response(
            self.get_serializer(webinar).data,
            "Registered successfully" if created else "Already registered",
        )
