"""
Certificate issuance and public verification.

Issuance is a find-or-create guarded by the unique (student, course)
constraint, so repeated or parallel requests always converge on one row.
"""
import logging

from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied

from core.exceptions import Conflict, PreconditionFailed
from courses.services import get_completion_date, get_completion_percentage, get_course
from .models import Certificate, generate_certificate_id

logger = logging.getLogger(__name__)

MAX_CERTIFICATE_ID_RETRIES = 3


def find_certificate(student, course):
    return Certificate.objects.filter(student=student, course=course).first()


def _usable(certificate):
    if not certificate.is_active:
        raise Conflict("The certificate for this course has been revoked")
    return certificate


def generate_certificate(student, course_id):
    """Returns (certificate, created)."""
    course = get_course(course_id)

    existing = find_certificate(student, course)
    if existing is not None:
        return _usable(existing), False

    if get_completion_percentage(student, course) < 100:
        raise PreconditionFailed("Course not completed yet")

    completed_at = get_completion_date(student, course) or timezone.now()

    for _ in range(MAX_CERTIFICATE_ID_RETRIES):
        try:
            with transaction.atomic():
                certificate = Certificate.objects.create(
                    certificate_id=generate_certificate_id(),
                    student=student,
                    course=course,
                    student_name=student.display_name,
                    course_name=course.title,
                    instructor_name=course.instructor_name,
                    completed_at=completed_at,
                )
        except IntegrityError:
            existing = find_certificate(student, course)
            if existing is not None:
                logger.info(f"Certificate for {student.email} / course {course.pk} issued by a parallel request")
                return _usable(existing), False
            logger.warning("Certificate id collision, retrying with a fresh id")
            continue

        logger.info(f"Certificate {certificate.certificate_id} issued to {student.email} for course {course.pk}")
        return certificate, True

    raise Conflict("Could not allocate a certificate id, please retry")


def get_student_certificates(student):
    """Every certificate of the student, revoked ones included with their status."""
    return Certificate.objects.filter(student=student).select_related('course').order_by('-issue_date')


def get_active_certificate(certificate_id):
    try:
        return Certificate.objects.get(certificate_id=certificate_id, status=Certificate.STATUS_ACTIVE)
    except Certificate.DoesNotExist:
        raise NotFound("Certificate not found")


def verify_certificate(certificate_id):
    return get_active_certificate(certificate_id)


def get_certificate_for_download(user, certificate_id):
    certificate = get_active_certificate(certificate_id)
    if certificate.student_id != user.id and not user.is_admin_role:
        raise PermissionDenied("You can only download your own certificates")
    return certificate


def revoke_certificate(certificate_id, revoked_by=None):
    try:
        certificate = Certificate.objects.get(certificate_id=certificate_id)
    except Certificate.DoesNotExist:
        raise NotFound("Certificate not found")

    if certificate.is_active:
        certificate.status = Certificate.STATUS_REVOKED
        certificate.revoked_at = timezone.now()
        certificate.save(update_fields=['status', 'revoked_at'])
        logger.info(
            f"Certificate {certificate_id} revoked"
            + (f" by {revoked_by.email}" if revoked_by else "")
        )
    return certificate
