# certificates/urls.py
from django.urls import re_path
from .views import (
    GenerateCertificateView, MyCertificatesView, VerifyCertificateView,
    DownloadCertificateView, RevokeCertificateView, CertificateListView,
)

CERTIFICATE_ID = r'(?P<certificate_id>[A-Za-z0-9-]+)'

urlpatterns = [
    re_path(r'^$', CertificateListView.as_view(), name='certificate-list'),
    re_path(r'^generate/?$', GenerateCertificateView.as_view(), name='generate'),
    re_path(r'^my/?$', MyCertificatesView.as_view(), name='my-certificates'),
    re_path(rf'^verify/{CERTIFICATE_ID}/?$', VerifyCertificateView.as_view(), name='verify'),
    re_path(rf'^{CERTIFICATE_ID}/download/?$', DownloadCertificateView.as_view(), name='download'),
    re_path(rf'^{CERTIFICATE_ID}/revoke/?$', RevokeCertificateView.as_view(), name='revoke'),
]
