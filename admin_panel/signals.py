import logging
from django.db.models.signals import post_save
from django.dispatch import receiver
from certificates.models import Certificate
from webinars.models import WebinarRegistration
from .models import Notification

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Certificate)
def notify_certificate_issued(sender, instance, created, **kwargs):
    if not created:
        return
    Notification.objects.create(
        recipient=instance.student,
        kind=Notification.KIND_CERTIFICATE_ISSUED,
        title="Certificate issued",
        message=f"Your certificate for {instance.course_name} is ready: {instance.certificate_id}",
        priority=Notification.PRIORITY_HIGH,
    )
    logger.debug(f"Certificate notification queued for user {instance.student_id}")


@receiver(post_save, sender=WebinarRegistration)
def notify_webinar_registration(sender, instance, created, **kwargs):
    if not created:
        return
    webinar = instance.webinar
    Notification.objects.create(
        recipient=instance.user,
        kind=Notification.KIND_WEBINAR_REGISTERED,
        title="Webinar registration confirmed",
        message=f"You are registered for {webinar.title} on {webinar.scheduled_at:%B %d, %Y at %H:%M} UTC.",
    )
