"""
ViewSets for the events app.

Anyone can list events, read an event and see its attendees.  Changing or
deleting an event and reviewing attendance is reserved to the group
organizer and co-hosts; any member of the group may request to attend.

    GET    /api/events?name&type&startDate&page&size
    GET    /api/events/{id}
    PUT    /api/events/{id}
    DELETE /api/events/{id}
    POST   /api/events/{id}/images
    GET    /api/events/{id}/attendees
    POST   /api/events/{id}/attendance        request attendance (pending)
    PUT    /api/events/{id}/attendance        {userId, status}
    DELETE /api/events/{id}/attendance        {userId}
    DELETE /api/event-images/{id}
"""

import logging

from django.db import IntegrityError, transaction
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from common.exceptions import Conflict
from common.pagination import PageSizePagination
from groups.permissions import can_manage_group, has_membership, is_organizer
from .models import Attendance, Event, EventImage
from .serializers import (
    AttendanceChangeSerializer,
    AttendanceSerializer,
    AttendanceTargetSerializer,
    AttendeeSerializer,
    EventDetailSerializer,
    EventImageSerializer,
    EventListSerializer,
    EventQuerySerializer,
    EventSerializer,
)

logger = logging.getLogger(__name__)

EVENT_NOT_FOUND = "Event couldn't be found"


class EventPagination(PageSizePagination):
    results_key = "Events"


def _deny(request, action_name, event):
    logger.warning(
        "Denied %s on event=%s for user=%s",
        action_name, event.pk, getattr(request.user, "id", None),
    )
    raise PermissionDenied("Forbidden")


class EventViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    Events of all groups, plus image upload and the attendance workflow.
    Creation lives under /api/groups/{id}/events.
    """
    serializer_class = EventListSerializer
    pagination_class = EventPagination
    lookup_value_regex = r"\d+"

    # ------------------------ Queryset -----------------------
    def get_queryset(self):
        qs = Event.objects.select_related("group", "venue")
        if self.action != "list":
            return qs

        params = EventQuerySerializer(data=self.request.query_params)
        params.is_valid(raise_exception=True)
        filters = params.validated_data

        if filters.get("name"):
            qs = qs.filter(name=filters["name"])
        if filters.get("type"):
            qs = qs.filter(type=filters["type"])
        if filters.get("startDate"):
            qs = qs.filter(start_date__date=filters["startDate"].date())
        return qs.with_listing_fields()

    def get_object(self):
        try:
            return Event.objects.select_related("group").get(pk=self.kwargs.get(self.lookup_field))
        except (Event.DoesNotExist, ValueError, TypeError):
            raise NotFound(EVENT_NOT_FOUND)

    # ---------------------- Permissions ----------------------
    def get_permissions(self):
        """Anonymous access to reads; everything else requires auth."""
        if self.action in ["list", "retrieve", "attendees"]:
            return [AllowAny()]
        return [IsAuthenticated()]

    # ------------------------- Reads -------------------------
    def retrieve(self, request, *args, **kwargs):
        try:
            event = (
                Event.objects.select_related("group__organizer", "venue")
                .prefetch_related("group__images", "images")
                .with_num_attending()
                .get(pk=kwargs.get(self.lookup_field))
            )
        except Event.DoesNotExist:
            raise NotFound(EVENT_NOT_FOUND)
        return Response({
            "event": EventDetailSerializer(event).data,
            "numAttending": event.num_attending,
        })

    # ----------------------- Mutations -----------------------
    def update(self, request, *args, **kwargs):
        event = self.get_object()
        if not can_manage_group(request.user, event.group):
            _deny(request, "update", event)

        # only the provided fields are validated and merged
        serializer = EventSerializer(event, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info("Updated event=%s fields=%s", event.pk, sorted(serializer.validated_data))
        return Response(serializer.data)

    def partial_update(self, request, *args, **kwargs):
        return self.update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        event = self.get_object()
        if not can_manage_group(request.user, event.group):
            _deny(request, "delete", event)
        event.purge()
        return Response({"message": "Successfully deleted"})

    @action(detail=True, methods=["post"], url_path="images")
    def images(self, request, pk=None):
        event = self.get_object()
        serializer = EventImageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        image = serializer.save(event=event)
        return Response(EventImageSerializer(image).data, status=status.HTTP_201_CREATED)

    # ---------------------- Attendance -----------------------
    @action(detail=True, methods=["get"], url_path="attendees")
    def attendees(self, request, pk=None):
        """
        Organizer and co-hosts see every attendance; everyone else only sees
        attendances that are no longer pending.
        """
        event = self.get_object()
        qs = event.attendances.select_related("user").order_by("id")
        if not can_manage_group(request.user, event.group):
            qs = qs.exclude(status=Attendance.STATUS_PENDING)
        return Response({"Attendees": AttendeeSerializer(qs, many=True).data})

    @action(detail=True, methods=["post", "put", "delete"], url_path="attendance")
    def attendance(self, request, pk=None):
        event = self.get_object()
        if request.method == "POST":
            return self._request_attendance(request, event)
        if request.method == "PUT":
            return self._update_attendance(request, event)
        return self._delete_attendance(request, event)

    def _request_attendance(self, request, event):
        if not has_membership(request.user, event.group):
            _deny(request, "attendance request", event)

        existing = Attendance.objects.filter(event=event, user=request.user).first()
        if existing is not None:
            self._raise_duplicate(existing)
        try:
            with transaction.atomic():
                Attendance.objects.create(event=event, user=request.user, status=Attendance.STATUS_PENDING)
        except IntegrityError:
            # lost a race against a concurrent request for the same user/event
            self._raise_duplicate(Attendance.objects.get(event=event, user=request.user))

        logger.info("Attendance requested event=%s user=%s", event.pk, request.user.id)
        return Response({"userId": request.user.id, "status": Attendance.STATUS_PENDING})

    @staticmethod
    def _raise_duplicate(attendance):
        if attendance.status == Attendance.STATUS_PENDING:
            raise Conflict("Attendance has already been requested")
        raise Conflict("User is already an attendee of the event")

    def _update_attendance(self, request, event):
        if request.data.get("status") == Attendance.STATUS_PENDING:
            raise ValidationError({"status": "Cannot change an attendance status to pending"})
        if not can_manage_group(request.user, event.group):
            _deny(request, "attendance update", event)

        payload = AttendanceChangeSerializer(data=request.data)
        payload.is_valid(raise_exception=True)

        attendance = Attendance.objects.filter(
            event=event, user_id=payload.validated_data["userId"]
        ).first()
        if attendance is None:
            raise NotFound("Attendance between the user and the event does not exist")

        previous = attendance.status
        attendance.status = payload.validated_data["status"]
        attendance.save(update_fields=["status", "updated_at"])
        logger.info(
            "Attendance event=%s user=%s %s -> %s",
            event.pk, attendance.user_id, previous, attendance.status,
        )
        return Response(AttendanceSerializer(attendance).data)

    def _delete_attendance(self, request, event):
        payload = AttendanceTargetSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        target_id = payload.validated_data["userId"]

        attendance = Attendance.objects.filter(event=event, user_id=target_id).first()
        if attendance is None:
            raise NotFound("Attendance does not exist for this User")

        if target_id != request.user.id and not is_organizer(request.user, event.group):
            logger.warning(
                "Denied attendance delete on event=%s target=%s for user=%s",
                event.pk, target_id, request.user.id,
            )
            raise PermissionDenied("Only the User or organizer may delete an Attendance")

        attendance.delete()
        logger.info("Attendance deleted event=%s user=%s by=%s", event.pk, target_id, request.user.id)
        return Response({"message": "Successfully deleted attendance from event"})


class EventImageViewSet(mixins.DestroyModelMixin, viewsets.GenericViewSet):
    """DELETE /api/event-images/{id} (organizer or co-host of the event's group)."""
    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"

    def get_object(self):
        try:
            return EventImage.objects.select_related("event__group").get(pk=self.kwargs.get(self.lookup_field))
        except EventImage.DoesNotExist:
            raise NotFound("Event Image couldn't be found")

    def destroy(self, request, *args, **kwargs):
        image = self.get_object()
        if not can_manage_group(request.user, image.event.group):
            _deny(request, "image delete", image.event)
        image.delete()
        return Response({"message": "Successfully deleted"})
