"""
Models for the events app.

An `Event` belongs to a single group and optionally to one of that group's
venues.  `EventImage` rows hold image URLs (one of them flagged as the
preview), and `Attendance` links a user to an event with a status that moves
from ``pending`` to ``attending`` or ``waitlist``.
"""

import logging

from django.conf import settings
from django.db import models, transaction
from django.db.models import Count, OuterRef, Q, Subquery

from groups.models import Group, Venue

logger = logging.getLogger(__name__)


class EventQuerySet(models.QuerySet):
    def with_num_attending(self):
        return self.annotate(
            num_attending=Count(
                "attendances",
                filter=Q(attendances__status__in=Attendance.COUNTED_STATUSES),
                distinct=True,
            )
        )

    def with_listing_fields(self):
        """`num_attending` plus the URL of the first preview image (or None)."""
        preview = (
            EventImage.objects.filter(event=OuterRef("pk"), preview=True)
            .order_by("id")
            .values("url")[:1]
        )
        return self.with_num_attending().annotate(preview_image=Subquery(preview))


class Event(models.Model):
    """Represents an event hosted by a group."""
    TYPE_ONLINE = "Online"
    TYPE_IN_PERSON = "In person"
    TYPE_CHOICES = [
        (TYPE_ONLINE, "Online"),
        (TYPE_IN_PERSON, "In person"),
    ]

    group = models.ForeignKey(Group, on_delete=models.CASCADE, related_name="events")
    venue = models.ForeignKey(
        Venue,
        on_delete=models.SET_NULL,
        related_name="events",
        null=True,
        blank=True,
    )
    name = models.CharField(max_length=255)
    description = models.TextField()
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default=TYPE_IN_PERSON)
    capacity = models.PositiveIntegerField(default=0)
    price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = EventQuerySet.as_manager()

    class Meta:
        ordering = ["start_date", "id"]
        indexes = [
            models.Index(fields=["group", "start_date"], name="event_group_start_idx"),
            models.Index(fields=["name"], name="event_name_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.group.name})"

    def count_attending(self) -> int:
        return self.attendances.filter(status__in=Attendance.COUNTED_STATUSES).count()

    def purge(self) -> None:
        """
        Delete the event together with its attendances and images.

        Dependents are removed explicitly (attendances first, then images)
        inside one transaction rather than left to the FK cascade.
        """
        with transaction.atomic():
            attendances, _ = self.attendances.all().delete()
            images, _ = self.images.all().delete()
            event_id = self.pk
            self.delete()
        logger.info(
            "Deleted event=%s with %s attendance(s) and %s image(s)",
            event_id, attendances, images,
        )


class EventImage(models.Model):
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="images")
    url = models.URLField(max_length=500)
    preview = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"EventImage<{self.event_id}:{self.url}>"


class Attendance(models.Model):
    STATUS_PENDING = "pending"
    STATUS_WAITLIST = "waitlist"
    STATUS_ATTENDING = "attending"
    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_WAITLIST, "Waitlist"),
        (STATUS_ATTENDING, "Attending"),
    ]
    # statuses counted by numAttending
    COUNTED_STATUSES = (STATUS_ATTENDING, STATUS_WAITLIST)

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="attendances")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="attendances")
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "event_attendances"
        unique_together = ("event", "user")
        indexes = [
            models.Index(fields=["event", "status"], name="attendance_event_status_idx"),
            models.Index(fields=["user"], name="attendance_user_idx"),
        ]

    def __str__(self):
        return f"{self.user_id} -> {self.event_id} ({self.status})"
