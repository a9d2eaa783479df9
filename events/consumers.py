"""
WebSocket consumer for the events app.

Clients connect to `ws/events/<event_id>/` and join the channel group
`event_<event_id>`.  Attendance changes on that event are pushed to the
group by `events.signals`; clients only listen (plus a ping/pong keepalive).
Authentication is handled by the JWT middleware.
"""
from channels.generic.websocket import AsyncJsonWebsocketConsumer


def event_group_name(event_id) -> str:
    return f"event_{event_id}"


class EventConsumer(AsyncJsonWebsocketConsumer):
    """Streams attendance updates for a single event."""

    async def connect(self) -> None:
        user = self.scope.get("user")
        if not user or user.is_anonymous:
            await self.close(code=4401)
            return
        self.event_id = self.scope["url_route"]["kwargs"]["event_id"]
        self.group_name = event_group_name(self.event_id)
        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()
        await self.send_json({"type": "welcome", "eventId": self.event_id})

    async def disconnect(self, code: int) -> None:
        if hasattr(self, "group_name"):
            await self.channel_layer.group_discard(self.group_name, self.channel_name)

    async def receive_json(self, content: dict, **kwargs) -> None:
        if content.get("type") == "ping":
            await self.send_json({"type": "pong"})

    async def attendance_changed(self, event: dict) -> None:
        await self.send_json({
            "type": "attendance",
            "action": event["action"],
            "attendance": event["attendance"],
            "numAttending": event["numAttending"],
        })
