"""
JWT authentication middleware for Django Channels.

The token is read from the WebSocket's `Authorization: Bearer <token>`
header, falling back to a `token` query parameter for browsers that cannot
set headers.  A valid access token puts the matching user into
`scope['user']`; anything else leaves an `AnonymousUser` there.
"""

import logging
import urllib.parse
from typing import Callable, Optional

from channels.auth import AuthMiddlewareStack
from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken

logger = logging.getLogger(__name__)

User = get_user_model()


@database_sync_to_async
def get_user_from_token(token: str):
    try:
        access = AccessToken(token)
    except (InvalidToken, TokenError) as exc:
        logger.info("Rejected websocket token: %s", exc)
        return None
    user_id = access.get(api_settings.USER_ID_CLAIM)
    if not user_id:
        return None
    return User.objects.filter(pk=user_id, is_active=True).first()


def _token_from_scope(scope) -> Optional[str]:
    headers = dict(scope.get("headers", []))
    auth_header = headers.get(b"authorization", b"").decode()
    if auth_header.lower().startswith("bearer "):
        return auth_header.split(" ", 1)[1].strip()

    params = urllib.parse.parse_qs(scope.get("query_string", b"").decode())
    return params.get("token", [None])[0]


class _JWTMiddleware(BaseMiddleware):
    async def __call__(self, scope, receive, send):
        token = _token_from_scope(scope)
        scope["user"] = AnonymousUser()
        if token:
            user = await get_user_from_token(token)
            if user:
                scope["user"] = user

        return await super().__call__(scope, receive, send)


def JWTAuthMiddlewareStack(inner: Callable):
    """Entry point for the middleware stack used by Channels routing."""
    return _JWTMiddleware(AuthMiddlewareStack(inner))
