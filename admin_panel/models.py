from django.db import models
from django.conf import settings


class Notification(models.Model):
    """In-app message raised by a platform event for one user"""
    KIND_CERTIFICATE_ISSUED = 'certificate_issued'
    KIND_WEBINAR_REGISTERED = 'webinar_registered'
    KIND_GENERAL = 'general'

    KIND_CHOICES = [
        (KIND_CERTIFICATE_ISSUED, 'Certificate issued'),
        (KIND_WEBINAR_REGISTERED, 'Webinar registration'),
        (KIND_GENERAL, 'General'),
    ]

    PRIORITY_LOW = 'low'
    PRIORITY_NORMAL = 'normal'
    PRIORITY_HIGH = 'high'

    PRIORITY_CHOICES = [
        (PRIORITY_LOW, 'Low'),
        (PRIORITY_NORMAL, 'Normal'),
        (PRIORITY_HIGH, 'High'),
    ]

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='notifications',
    )
    kind = models.CharField(max_length=30, choices=KIND_CHOICES, default=KIND_GENERAL)
    title = models.CharField(max_length=200)
    message = models.TextField(blank=True, default='')
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default=PRIORITY_NORMAL)
    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['recipient', 'is_read'], name='notification_recipient_read'),
        ]

    def __str__(self):
        return f"{self.recipient} - {self.title}"
