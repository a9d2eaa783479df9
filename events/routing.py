"""
WebSocket routing for the events app.

`<int:event_id>` selects the event whose attendance changes are streamed.
"""
from django.urls import path
from .consumers import EventConsumer


websocket_urlpatterns = [
    path("ws/events/<int:event_id>/", EventConsumer.as_asgi()),
]
