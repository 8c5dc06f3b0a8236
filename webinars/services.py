import logging

from django.db import IntegrityError, transaction
from django.db.models import F, Q
from django.utils import timezone
from rest_framework.exceptions import NotFound

from core.exceptions import Conflict, PreconditionFailed
from .models import Webinar, WebinarRegistration

logger = logging.getLogger(__name__)

UPCOMING_LIMIT = 10


def get_webinar(webinar_id):
    try:
        return Webinar.objects.select_related('instructor').get(pk=webinar_id)
    except (Webinar.DoesNotExist, ValueError, TypeError):
        raise NotFound("Webinar not found")


def create_webinar(instructor, validated_data):
    webinar = Webinar.objects.create(instructor=instructor, **validated_data)
    logger.info(f"Webinar {webinar.pk} created by {instructor.email}")
    return webinar


def upcoming_webinars():
    return (
        Webinar.objects.filter(scheduled_at__gte=timezone.now(), status=Webinar.STATUS_UPCOMING)
        .select_related('instructor')
        .order_by('scheduled_at')[:UPCOMING_LIMIT]
    )


def is_registered(webinar, user):
    if not user or not user.is_authenticated:
        return False
    return WebinarRegistration.objects.filter(webinar=webinar, user=user).exists()


def ensure_registration_open(webinar):
    if webinar.status in (Webinar.STATUS_CANCELLED, Webinar.STATUS_COMPLETED):
        raise PreconditionFailed(f"Registration is closed, the webinar is {webinar.status}")
    if webinar.registration_deadline and webinar.registration_deadline < timezone.now():
        raise PreconditionFailed("The registration deadline has passed")


def register_for_webinar(webinar_id, user):
    """
    Returns (webinar, created). Registering twice is a no-op.

    The registration row and the seat increment commit together; the
    increment only matches while seats are left, so a full webinar rolls the
    registration back instead of overselling.
    """
    webinar = get_webinar(webinar_id)
    ensure_registration_open(webinar)

    with transaction.atomic():
        try:
            with transaction.atomic():
                WebinarRegistration.objects.create(webinar=webinar, user=user)
        except IntegrityError:
            logger.info(f"{user.email} already registered for webinar {webinar.pk}")
            webinar.refresh_from_db()
            return webinar, False

        claimed = (
            Webinar.objects.filter(pk=webinar.pk)
            .filter(Q(max_participants__isnull=True) | Q(total_registrations__lt=F('max_participants')))
            .update(total_registrations=F('total_registrations') + 1)
        )
        if not claimed:
            logger.warning(f"Webinar {webinar.pk} is full, rejected {user.email}")
            raise Conflict("Webinar is full")

    webinar.refresh_from_db()
    logger.info(f"{user.email} registered for webinar {webinar.pk} ({webinar.total_registrations} seats taken)")
    return webinar, True


def delete_webinar(webinar):
    logger.info(f"Webinar {webinar.pk} deleted")
    webinar.delete()
