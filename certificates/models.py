import secrets
import string
from django.db import models
from django.utils import timezone
from django.conf import settings

CERTIFICATE_ID_ALPHABET = string.ascii_uppercase + string.digits
CERTIFICATE_ID_RANDOM_LENGTH = 10


def generate_certificate_id():
    """CERT-<year>-<random>, drawn from the OS CSPRNG so ids cannot be guessed."""
    random_part = "".join(secrets.choice(CERTIFICATE_ID_ALPHABET) for _ in range(CERTIFICATE_ID_RANDOM_LENGTH))
    return f"CERT-{timezone.now().year}-{random_part}"


class Certificate(models.Model):
    STATUS_ACTIVE = 'active'
    STATUS_REVOKED = 'revoked'

    STATUS_CHOICES = [
        (STATUS_ACTIVE, 'Active'),
        (STATUS_REVOKED, 'Revoked'),
    ]

    certificate_id = models.CharField(max_length=50, unique=True)
    student = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="certificates")
    course = models.ForeignKey("courses.Course", on_delete=models.CASCADE, related_name="certificates")

    # names are frozen at issue time so the certificate reads the same later
    student_name = models.CharField(max_length=255)
    course_name = models.CharField(max_length=200)
    instructor_name = models.CharField(max_length=255, blank=True, default='')

    completed_at = models.DateTimeField()
    issue_date = models.DateTimeField(default=timezone.now)
    verification_url = models.URLField(max_length=500)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_ACTIVE, db_index=True)
    revoked_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        unique_together = ('student', 'course')
        ordering = ['-issue_date']

    def save(self, *args, **kwargs):
        if not self.certificate_id:
            self.certificate_id = generate_certificate_id()
        if not self.verification_url:
            self.verification_url = build_verification_url(self.certificate_id)
        super().save(*args, **kwargs)

    @property
    def is_active(self):
        return self.status == self.STATUS_ACTIVE

    def __str__(self):
        return f"{self.certificate_id} - {self.student_name} - {self.course_name}"


def build_verification_url(certificate_id):
    return f"{settings.FRONTEND_URL}/certificate/verify/{certificate_id}"
