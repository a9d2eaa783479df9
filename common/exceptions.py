"""
Error handling shared by every API view.

All error bodies carry a `message` key; validation failures additionally
carry an `errors` mapping with one message per invalid field.  Exceptions
DRF does not know about are logged and turned into a generic 500 so that
no view can take the process down.
"""
import logging

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "An error occurred while processing the request"


class Conflict(exceptions.APIException):
    """Duplicate request for something that already exists (reported as 400)."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Conflict"
    default_code = "conflict"


def _first_message(value):
    # DRF reports a list of messages per field; the API exposes the first one
    if isinstance(value, dict):
        return {key: _first_message(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return _first_message(value[0]) if value else ""
    return str(value)


def api_exception_handler(exc, context):
    response = exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.error(
            "Unhandled %s in %s",
            type(exc).__name__,
            type(view).__name__ if view is not None else "view",
            exc_info=exc,
        )
        set_rollback()
        return Response(
            {"message": INTERNAL_ERROR_MESSAGE},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, exceptions.ValidationError) and isinstance(exc.detail, dict):
        response.data = {"message": "Bad Request", "errors": _first_message(exc.detail)}
        return response

    data = response.data
    detail = data.get("detail", data) if isinstance(data, dict) else data
    response.data = {"message": _first_message(detail)}
    return response
