from datetime import timedelta
from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator


class Webinar(models.Model):
    TYPE_CHOICES = [
        ('seminar', 'Seminar'),
        ('webinar', 'Webinar'),
        ('workshop', 'Workshop'),
        ('free-class', 'Free class'),
    ]

    STATUS_UPCOMING = 'upcoming'
    STATUS_LIVE = 'live'
    STATUS_COMPLETED = 'completed'
    STATUS_CANCELLED = 'cancelled'

    STATUS_CHOICES = [
        (STATUS_UPCOMING, 'Upcoming'),
        (STATUS_LIVE, 'Live'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]

    title = models.CharField(max_length=200)
    description = models.TextField()
    instructor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='webinars')
    webinar_type = models.CharField(max_length=20, choices=TYPE_CHOICES)

    meeting_link = models.URLField(max_length=500)
    meeting_password = models.CharField(max_length=100, blank=True, default='')

    scheduled_at = models.DateTimeField(db_index=True)
    duration = models.PositiveIntegerField(validators=[MinValueValidator(1)], help_text="Minutes")
    end_time = models.DateTimeField(null=True, blank=True)

    is_free = models.BooleanField(default=True)
    price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    max_participants = models.PositiveIntegerField(null=True, blank=True, validators=[MinValueValidator(1)])
    registration_deadline = models.DateTimeField(null=True, blank=True)
    thumbnail = models.URLField(max_length=500, blank=True, default='')

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_UPCOMING, db_index=True)

    # seat counter; only ever changed through a conditional UPDATE
    total_registrations = models.PositiveIntegerField(default=0)
    total_attendees = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    COUNTER_FIELDS = ("total_registrations",)

    class Meta:
        ordering = ['scheduled_at']

    def save(self, *args, **kwargs):
        if self.scheduled_at and self.duration:
            self.end_time = self.scheduled_at + timedelta(minutes=self.duration)
        if not self._state.adding and kwargs.get("update_fields") is None:
            # never write back a possibly stale seat count
            kwargs["update_fields"] = [
                f.name for f in self._meta.concrete_fields
                if not f.primary_key and f.name not in self.COUNTER_FIELDS
            ]
        super().save(*args, **kwargs)

    @property
    def seats_left(self):
        if self.max_participants is None:
            return None
        return max(0, self.max_participants - self.total_registrations)

    def __str__(self):
        return f"{self.title} ({self.scheduled_at:%Y-%m-%d %H:%M})"


class WebinarRegistration(models.Model):
    webinar = models.ForeignKey(Webinar, on_delete=models.CASCADE, related_name='registrations')
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='webinar_registrations')
    registered_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ('webinar', 'user')
        ordering = ['-registered_at']

    def __str__(self):
        return f"{self.user.email} -> {self.webinar.title}"
