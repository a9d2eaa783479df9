"""
ASGI entry point.

HTTP requests go to Django; WebSocket connections under `ws/events/<id>/`
are authenticated from their JWT and routed to the attendance feed.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "meetup_backend.settings.dev")

# Django must be set up before anything imports models
django_asgi_app = get_asgi_application()

from channels.routing import ProtocolTypeRouter, URLRouter  # noqa: E402
from channels.security.websocket import AllowedHostsOriginValidator  # noqa: E402
from django.conf import settings  # noqa: E402

from common.channels_jwt_auth import JWTAuthMiddlewareStack  # noqa: E402
from events.routing import websocket_urlpatterns  # noqa: E402

if settings.DEBUG:
    from django.contrib.staticfiles.handlers import ASGIStaticFilesHandler

    django_asgi_app = ASGIStaticFilesHandler(django_asgi_app)

websocket_app = JWTAuthMiddlewareStack(URLRouter(websocket_urlpatterns))

application = ProtocolTypeRouter({
    "http": django_asgi_app,
    "websocket": AllowedHostsOriginValidator(websocket_app),
})
