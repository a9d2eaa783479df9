"""
Serializers for the events app.

JSON keys are camelCase (`groupId`, `startDate`, ...) while model fields
stay snake_case.  `EventSerializer` handles creation and updates: every
field is validated on its own so that a single 400 reports all invalid
fields at once.
"""
from django.utils import timezone
from rest_framework import serializers

from common.pagination import PageQuerySerializer
from groups.models import Group, GroupImage, Venue
from users.serializers import UserMiniSerializer
from .models import Attendance, Event, EventImage


def _messages(text, *keys):
    return {key: text for key in keys}


TYPE_MESSAGE = "Type must be Online or In person"


# ---------- Nested shapes ----------

class EventGroupSerializer(serializers.ModelSerializer):
    class Meta:
        model = Group
        fields = ["id", "name", "city", "state"]


class EventVenueSerializer(serializers.ModelSerializer):
    class Meta:
        model = Venue
        fields = ["id", "city", "state"]


class GroupImageUrlSerializer(serializers.ModelSerializer):
    class Meta:
        model = GroupImage
        fields = ["url"]


class EventDetailGroupSerializer(serializers.ModelSerializer):
    GroupImages = GroupImageUrlSerializer(source="images", many=True, read_only=True)
    Organizer = UserMiniSerializer(source="organizer", read_only=True)

    class Meta:
        model = Group
        fields = ["id", "name", "private", "city", "state", "GroupImages", "Organizer"]


class EventDetailVenueSerializer(serializers.ModelSerializer):
    class Meta:
        model = Venue
        fields = ["id", "address", "city", "state"]


class EventImageSerializer(serializers.ModelSerializer):
    url = serializers.URLField(
        max_length=500,
        error_messages={"required": "Url is required", "blank": "Url is required", "invalid": "Url is invalid"},
    )
    preview = serializers.BooleanField(required=False, default=False)

    class Meta:
        model = EventImage
        fields = ["id", "url", "preview"]


# ---------- Read shapes ----------

class EventListSerializer(serializers.ModelSerializer):
    """Reduced projection used by event lists (no description/price/capacity/timestamps)."""
    groupId = serializers.IntegerField(source="group_id", read_only=True)
    venueId = serializers.IntegerField(source="venue_id", read_only=True)
    startDate = serializers.DateTimeField(source="start_date", read_only=True)
    endDate = serializers.DateTimeField(source="end_date", read_only=True)
    numAttending = serializers.IntegerField(source="num_attending", read_only=True)
    previewImage = serializers.CharField(source="preview_image", read_only=True, allow_null=True)
    Group = EventGroupSerializer(source="group", read_only=True)
    Venue = EventVenueSerializer(source="venue", read_only=True, allow_null=True)

    class Meta:
        model = Event
        fields = [
            "id", "groupId", "venueId", "name", "type", "startDate", "endDate",
            "numAttending", "previewImage", "Group", "Venue",
        ]


class EventDetailSerializer(serializers.ModelSerializer):
    groupId = serializers.IntegerField(source="group_id", read_only=True)
    venueId = serializers.IntegerField(source="venue_id", read_only=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, coerce_to_string=False, read_only=True)
    startDate = serializers.DateTimeField(source="start_date", read_only=True)
    endDate = serializers.DateTimeField(source="end_date", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)
    Group = EventDetailGroupSerializer(source="group", read_only=True)
    Venue = EventDetailVenueSerializer(source="venue", read_only=True, allow_null=True)
    EventImages = EventImageSerializer(source="images", many=True, read_only=True)

    class Meta:
        model = Event
        fields = [
            "id", "groupId", "venueId", "name", "description", "type", "capacity",
            "price", "startDate", "endDate", "createdAt", "updatedAt",
            "Group", "Venue", "EventImages",
        ]


# ---------- Write shape ----------

class EventSerializer(serializers.ModelSerializer):
    """
    Create (all fields required) and update (only provided fields) events.

    The owning group comes from `context["group"]` on create and from the
    instance on update; it scopes the venue lookup.
    """
    groupId = serializers.IntegerField(source="group_id", read_only=True)
    venueId = serializers.PrimaryKeyRelatedField(
        source="venue",
        queryset=Venue.objects.all(),
        required=False,
        allow_null=True,
        error_messages=_messages("Venue does not exist", "does_not_exist", "incorrect_type"),
    )
    name = serializers.CharField(
        min_length=5,
        max_length=255,
        error_messages=_messages(
            "Name must be at least 5 characters", "required", "null", "blank", "min_length", "invalid",
        ),
    )
    type = serializers.ChoiceField(
        choices=Event.TYPE_CHOICES,
        error_messages=_messages(TYPE_MESSAGE, "required", "null", "invalid_choice"),
    )
    capacity = serializers.IntegerField(
        min_value=0,
        error_messages=_messages(
            "Capacity must be an integer", "required", "null", "invalid", "min_value", "max_string_length",
        ),
    )
    price = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=0,
        coerce_to_string=False,
        error_messages=_messages(
            "Price is invalid", "required", "null", "invalid", "min_value",
            "max_digits", "max_decimal_places", "max_whole_digits", "max_string_length",
        ),
    )
    description = serializers.CharField(
        error_messages=_messages("Description is required", "required", "null", "blank", "invalid"),
    )
    startDate = serializers.DateTimeField(
        source="start_date",
        error_messages={
            "required": "Start date is required",
            "null": "Start date is required",
            "invalid": "Start date must be a valid date",
        },
    )
    endDate = serializers.DateTimeField(
        source="end_date",
        error_messages={
            "required": "End date is required",
            "null": "End date is required",
            "invalid": "End date must be a valid date",
        },
    )

    class Meta:
        model = Event
        fields = [
            "id", "groupId", "venueId", "name", "type", "capacity", "price",
            "description", "startDate", "endDate",
        ]

    def _group(self):
        if self.instance is not None:
            return self.instance.group
        return self.context.get("group")

    def validate_venueId(self, venue):
        group = self._group()
        if venue is not None and group is not None and venue.group_id != group.id:
            raise serializers.ValidationError("Venue does not exist")
        return venue

    def validate_startDate(self, value):
        if value < timezone.now():
            raise serializers.ValidationError("Start date must be in the future")
        return value

    def _effective_date(self, field_name, attr):
        """Incoming value for the field if it parses, else the stored one."""
        raw = self.initial_data.get(field_name) if hasattr(self.initial_data, "get") else None
        if raw not in (None, ""):
            try:
                return self.fields[field_name].to_internal_value(raw)
            except serializers.ValidationError:
                return None
        return getattr(self.instance, attr, None)

    def to_internal_value(self, data):
        # the date order is reported under endDate together with the other field errors
        try:
            attrs = super().to_internal_value(data)
            errors = {}
        except serializers.ValidationError as exc:
            attrs, errors = None, dict(exc.detail)

        if "endDate" not in errors:
            start = self._effective_date("startDate", "start_date")
            end = self._effective_date("endDate", "end_date")
            if start is not None and end is not None and end < start:
                errors["endDate"] = ["End date is less than start date"]

        if errors:
            raise serializers.ValidationError(errors)
        return attrs


# ---------- Query / attendance ----------

class EventQuerySerializer(PageQuerySerializer):
    name = serializers.CharField(required=False, allow_blank=True)
    type = serializers.ChoiceField(
        choices=Event.TYPE_CHOICES,
        required=False,
        error_messages={"invalid_choice": "Type must be 'Online' or 'In person'"},
    )
    startDate = serializers.DateTimeField(
        required=False,
        input_formats=["iso-8601", "%Y-%m-%d"],
        error_messages={"invalid": "Start date must be a valid datetime"},
    )


class AttendeeSerializer(serializers.Serializer):
    """A user attending an event, as listed by GET /events/:id/attendees."""
    id = serializers.IntegerField(source="user.id")
    firstName = serializers.CharField(source="user.first_name")
    lastName = serializers.CharField(source="user.last_name")
    Attendance = serializers.SerializerMethodField()

    def get_Attendance(self, obj):
        return {"status": obj.status}


class AttendanceSerializer(serializers.ModelSerializer):
    eventId = serializers.IntegerField(source="event_id", read_only=True)
    userId = serializers.IntegerField(source="user_id", read_only=True)

    class Meta:
        model = Attendance
        fields = ["id", "eventId", "userId", "status"]


class AttendanceChangeSerializer(serializers.Serializer):
    userId = serializers.IntegerField(error_messages={"required": "userId is required", "invalid": "userId must be an integer"})
    status = serializers.ChoiceField(
        choices=Attendance.STATUS_CHOICES,
        error_messages={"required": "Status is required", "invalid_choice": "Status must be attending or waitlist"},
    )


class AttendanceTargetSerializer(serializers.Serializer):
    userId = serializers.IntegerField(error_messages={"required": "userId is required", "invalid": "userId must be an integer"})
