# events/signals.py
import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .consumers import event_group_name
from .models import Attendance, Event

logger = logging.getLogger(__name__)


def _broadcast(instance: Attendance, action: str) -> None:
    """Publish an attendance change to the event's group once the write commits."""
    attendance = {
        "userId": instance.user_id,
        "eventId": instance.event_id,
        "status": instance.status,
    }

    def _send():
        channel_layer = get_channel_layer()
        if channel_layer is None:
            return  # Channels not configured

        # nothing is published for attendances removed by Event.purge()
        event = Event.objects.filter(pk=attendance["eventId"]).first()
        if event is None:
            return

        async_to_sync(channel_layer.group_send)(
            event_group_name(event.pk),
            {
                "type": "attendance.changed",
                "action": action,
                "attendance": attendance,
                "numAttending": event.count_attending(),
            },
        )
        logger.debug("Broadcast attendance %s for event=%s user=%s", action, event.pk, attendance["userId"])

    transaction.on_commit(_send)


@receiver(post_save, sender=Attendance)
def attendance_saved(sender, instance: Attendance, created, **kwargs):
    _broadcast(instance, "created" if created else "updated")


@receiver(post_delete, sender=Attendance)
def attendance_deleted(sender, instance: Attendance, **kwargs):
    _broadcast(instance, "deleted")
