import logging
from django.http import HttpResponse
from rest_framework import generics, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView
from admin_panel.permissions import IsAdminRole
from core.responses import send_response
from . import services
from .filters import CertificateFilter
from .models import Certificate
from .serializers import (
    CertificateSerializer, CertificateVerificationSerializer, GenerateCertificateSerializer,
)
from .utils import render_certificate_pdf

logger = logging.getLogger(__name__)


class GenerateCertificateView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = GenerateCertificateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        certificate, created = services.generate_certificate(
            request.user, serializer.validated_data['course_id']
        )
        if created:
            return send_response(CertificateSerializer(certificate).data, "Certificate generated", status.HTTP_201_CREATED)
        return send_response(CertificateSerializer(certificate).data, "Certificate already issued")


class MyCertificatesView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        certificates = services.get_student_certificates(request.user)
        return send_response(CertificateSerializer(certificates, many=True).data, "Certificates fetched")


class VerifyCertificateView(APIView):
    """Public lookup; the answer does not depend on who is asking."""
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request, certificate_id):
        certificate = services.verify_certificate(certificate_id)
        return send_response(CertificateVerificationSerializer(certificate).data, "Certificate verified")


class DownloadCertificateView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, certificate_id):
        certificate = services.get_certificate_for_download(request.user, certificate_id)
        pdf_bytes = render_certificate_pdf(certificate)
        response = HttpResponse(pdf_bytes, content_type="application/pdf")
        response["Content-Disposition"] = f'attachment; filename="{certificate.certificate_id}.pdf"'
        return response


class RevokeCertificateView(APIView):
    permission_classes = [IsAuthenticated, IsAdminRole]

    def post(self, request, certificate_id):
        certificate = services.revoke_certificate(certificate_id, revoked_by=request.user)
        return send_response(CertificateSerializer(certificate).data, "Certificate revoked")


class CertificateListView(generics.ListAPIView):
    """Admin listing with filters, e.g. ?status=revoked&course=3"""
    permission_classes = [IsAuthenticated, IsAdminRole]
    serializer_class = CertificateSerializer
    queryset = Certificate.objects.all().select_related("student", "course")
    filterset_class = CertificateFilter

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        return send_response(self.get_serializer(queryset, many=True).data, "Certificates fetched")
