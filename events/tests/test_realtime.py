"""
Tests for the realtime attendance feed: the signal handlers that publish
attendance changes and the WebSocket consumer that relays them.
"""
from types import SimpleNamespace

import pytest
from channels.layers import get_channel_layer
from channels.routing import URLRouter
from channels.testing import WebsocketCommunicator
from django.contrib.auth.models import AnonymousUser
from django.db import transaction

from events.models import Attendance
from events.routing import websocket_urlpatterns


class RecordingLayer:
    def __init__(self):
        self.sent = []

    async def group_send(self, group, message):
        self.sent.append((group, message))


@pytest.fixture
def layer(monkeypatch):
    recorder = RecordingLayer()
    monkeypatch.setattr("events.signals.get_channel_layer", lambda: recorder)
    return recorder


@pytest.mark.django_db
def test_attendance_changes_are_broadcast(layer, event, make_user, django_capture_on_commit_callbacks):
    u = make_user()
    with django_capture_on_commit_callbacks(execute=True):
        attendance = Attendance.objects.create(event=event, user=u)
    with django_capture_on_commit_callbacks(execute=True):
        attendance.status = Attendance.STATUS_ATTENDING
        attendance.save()
    with django_capture_on_commit_callbacks(execute=True):
        attendance.delete()

    groups = {group for group, _ in layer.sent}
    assert groups == {f"event_{event.id}"}

    actions = [(m["action"], m["attendance"]["status"], m["numAttending"]) for _, m in layer.sent]
    assert actions == [
        ("created", "pending", 0),
        ("updated", "attending", 1),
        ("deleted", "attending", 0),
    ]
    assert layer.sent[0][1]["type"] == "attendance.changed"
    assert layer.sent[0][1]["attendance"]["userId"] == u.id


@pytest.mark.django_db
def test_nothing_broadcast_before_commit(layer, event, make_user, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks() as callbacks:
        Attendance.objects.create(event=event, user=make_user())
    assert layer.sent == []
    assert len(callbacks) == 1


@pytest.mark.django_db
def test_rolled_back_attendance_is_not_broadcast(layer, event, make_user, django_capture_on_commit_callbacks):
    u = make_user()
    with django_capture_on_commit_callbacks(execute=True):
        with pytest.raises(RuntimeError):
            with transaction.atomic():
                Attendance.objects.create(event=event, user=u)
                raise RuntimeError("abort")

    assert not Attendance.objects.filter(event=event, user=u).exists()
    assert layer.sent == []


@pytest.mark.django_db
def test_event_purge_does_not_broadcast(layer, event, make_user, django_capture_on_commit_callbacks):
    Attendance.objects.create(event=event, user=make_user(), status=Attendance.STATUS_ATTENDING)
    Attendance.objects.create(event=event, user=make_user())

    with django_capture_on_commit_callbacks(execute=True):
        event.purge()
    assert layer.sent == []


@pytest.mark.django_db
def test_no_broadcast_without_channel_layer(monkeypatch, event, make_user, django_capture_on_commit_callbacks):
    monkeypatch.setattr("events.signals.get_channel_layer", lambda: None)
    with django_capture_on_commit_callbacks(execute=True):
        Attendance.objects.create(event=event, user=make_user())
    assert Attendance.objects.filter(event=event).count() == 1


@pytest.mark.asyncio
async def test_consumer_rejects_anonymous():
    communicator = WebsocketCommunicator(URLRouter(websocket_urlpatterns), "/ws/events/5/")
    communicator.scope["user"] = AnonymousUser()
    connected, code = await communicator.connect()
    assert not connected
    assert code == 4401


@pytest.mark.asyncio
async def test_consumer_relays_attendance_updates():
    communicator = WebsocketCommunicator(URLRouter(websocket_urlpatterns), "/ws/events/5/")
    communicator.scope["user"] = SimpleNamespace(id=1, is_anonymous=False)
    connected, _ = await communicator.connect()
    assert connected
    assert await communicator.receive_json_from() == {"type": "welcome", "eventId": 5}

    await communicator.send_json_to({"type": "ping"})
    assert await communicator.receive_json_from() == {"type": "pong"}

    await get_channel_layer().group_send(
        "event_5",
        {
            "type": "attendance.changed",
            "action": "updated",
            "attendance": {"userId": 2, "eventId": 5, "status": "attending"},
            "numAttending": 1,
        },
    )
    message = await communicator.receive_json_from()
    assert message == {
        "type": "attendance",
        "action": "updated",
        "attendance": {"userId": 2, "eventId": 5, "status": "attending"},
        "numAttending": 1,
    }
    await communicator.disconnect()
