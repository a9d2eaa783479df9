import logging

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from common.exceptions import Conflict
from events.models import Event
from events.serializers import EventListSerializer, EventSerializer
from .models import Group, GroupImage, Membership
from .permissions import IsGroupOrganizerOrReadOnly, can_manage_group, is_organizer
from .serializers import (
    GroupDetailSerializer,
    GroupImageSerializer,
    GroupSerializer,
    MemberSerializer,
    MembershipChangeSerializer,
    MembershipSerializer,
    VenueSerializer,
)

User = get_user_model()

logger = logging.getLogger(__name__)


class GroupViewSet(viewsets.ModelViewSet):
    """
    - GET    /api/groups
    - POST   /api/groups                       (organizer becomes co-host)
    - GET    /api/groups/{id}
    - PUT    /api/groups/{id}                  (organizer)
    - DELETE /api/groups/{id}                  (organizer)
    - POST   /api/groups/{id}/images           (organizer)
    - GET    /api/groups/{id}/venues           (organizer/co-host)
    - POST   /api/groups/{id}/venues           (organizer/co-host)
    - GET    /api/groups/{id}/events
    - POST   /api/groups/{id}/events           (organizer/co-host)
    - GET    /api/groups/{id}/members
    - POST   /api/groups/{id}/membership       request to join
    - PUT    /api/groups/{id}/membership       {memberId, status}
    - DELETE /api/groups/{id}/membership       {memberId}
    """
    serializer_class = GroupSerializer
    lookup_value_regex = r"\d+"
    http_method_names = ["get", "post", "put", "patch", "delete", "head", "options"]

    def get_permissions(self):
        if self.action in {"list", "retrieve", "members"}:
            return [AllowAny()]
        if self.action == "events" and self.request.method == "GET":
            return [AllowAny()]
        if self.action in {"update", "partial_update", "destroy", "images"}:
            return [IsAuthenticated(), IsGroupOrganizerOrReadOnly()]
        return [IsAuthenticated()]

    def permission_denied(self, request, message=None, code=None):
        if request.user and request.user.is_authenticated:
            logger.warning(
                "Denied %s on group=%s for user=%s",
                self.action, self.kwargs.get("pk"), request.user.id,
            )
        super().permission_denied(request, message=message, code=code)

    # ---------- queryset / object helpers ----------
    def get_queryset(self):
        return Group.objects.with_listing_fields()

    def get_object(self):
        try:
            group = self.get_queryset().get(pk=self.kwargs.get("pk"))
        except Group.DoesNotExist:
            raise NotFound("Group couldn't be found")
        self.check_object_permissions(self.request, group)
        return group

    def _require_manager(self, request, group):
        if not can_manage_group(request.user, group):
            self.permission_denied(request, message="Forbidden")

    # ---------- reads ----------
    def list(self, request, *args, **kwargs):
        qs = self.get_queryset()
        return Response({"Groups": GroupSerializer(qs, many=True).data})

    def retrieve(self, request, *args, **kwargs):
        try:
            group = (
                self.get_queryset()
                .select_related("organizer")
                .prefetch_related("images", "venues")
                .get(pk=kwargs.get("pk"))
            )
        except Group.DoesNotExist:
            raise NotFound("Group couldn't be found")
        return Response(GroupDetailSerializer(group).data)

    # ---------- create / update / destroy ----------
    def create(self, request, *args, **kwargs):
        serializer = GroupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        with transaction.atomic():
            group = serializer.save(organizer=request.user)
            Membership.objects.create(
                group=group, user=request.user, status=Membership.STATUS_CO_HOST
            )
        logger.info("Group created group=%s organizer=%s", group.pk, request.user.id)
        return Response(GroupSerializer(group).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        group = self.get_object()
        # PUT merges the provided fields like PATCH
        serializer = GroupSerializer(group, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)

    def destroy(self, request, *args, **kwargs):
        group = self.get_object()
        group_id = group.pk
        with transaction.atomic():
            for event in group.events.all():
                event.purge()
            group.delete()
        logger.info("Deleted group=%s", group_id)
        return Response({"message": "Successfully deleted"})

    # ---------- images / venues ----------
    @action(detail=True, methods=["post"], url_path="images")
    def images(self, request, pk=None):
        group = self.get_object()
        serializer = GroupImageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        image = serializer.save(group=group)
        return Response(GroupImageSerializer(image).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["get", "post"], url_path="venues")
    def venues(self, request, pk=None):
        group = self.get_object()
        self._require_manager(request, group)

        if request.method == "GET":
            return Response({"Venues": VenueSerializer(group.venues.order_by("id"), many=True).data})

        serializer = VenueSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        venue = serializer.save(group=group)
        return Response(VenueSerializer(venue).data, status=status.HTTP_201_CREATED)

    # ---------- events ----------
    @action(detail=True, methods=["get", "post"], url_path="events")
    def events(self, request, pk=None):
        group = self.get_object()

        if request.method == "GET":
            qs = (
                Event.objects.filter(group=group)
                .select_related("group", "venue")
                .with_listing_fields()
            )
            return Response({"Events": EventListSerializer(qs, many=True).data})

        self._require_manager(request, group)
        serializer = EventSerializer(data=request.data, context={"group": group})
        serializer.is_valid(raise_exception=True)
        event = serializer.save(group=group)
        logger.info("Event created event=%s group=%s by=%s", event.pk, group.pk, request.user.id)
        return Response(EventSerializer(event).data, status=status.HTTP_201_CREATED)

    # ---------- membership ----------
    @action(detail=True, methods=["get"], url_path="members")
    def members(self, request, pk=None):
        """Pending requests are only listed for the organizer and co-hosts."""
        group = self.get_object()
        qs = group.memberships.select_related("user").order_by("id")
        if not can_manage_group(request.user, group):
            qs = qs.exclude(status=Membership.STATUS_PENDING)
        return Response({"Members": MemberSerializer(qs, many=True).data})

    @action(detail=True, methods=["post", "put", "delete"], url_path="membership")
    def membership(self, request, pk=None):
        group = self.get_object()
        if request.method == "POST":
            return self._request_membership(request, group)
        if request.method == "PUT":
            return self._change_membership(request, group)
        return self._delete_membership(request, group)

    @staticmethod
    def _raise_duplicate(membership):
        if membership.status == Membership.STATUS_PENDING:
            raise Conflict("Membership has already been requested")
        raise Conflict("User is already a member of the group")

    def _request_membership(self, request, group):
        existing = Membership.objects.filter(group=group, user=request.user).first()
        if existing is not None:
            self._raise_duplicate(existing)
        try:
            with transaction.atomic():
                Membership.objects.create(group=group, user=request.user)
        except IntegrityError:
            self._raise_duplicate(Membership.objects.get(group=group, user=request.user))

        logger.info("Membership requested group=%s user=%s", group.pk, request.user.id)
        return Response({"memberId": request.user.id, "status": Membership.STATUS_PENDING})

    def _target_user(self, member_id):
        user = User.objects.filter(pk=member_id).first()
        if user is None:
            raise ValidationError({"memberId": "User couldn't be found"})
        return user

    def _change_membership(self, request, group):
        if request.data.get("status") == Membership.STATUS_PENDING:
            raise ValidationError({"status": "Cannot change a membership status to pending"})

        payload = MembershipChangeSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        new_status = payload.validated_data["status"]

        # co-host grants and revocations are the organizer's alone
        if is_organizer(request.user, group):
            allowed = True
        else:
            allowed = new_status == Membership.STATUS_MEMBER and can_manage_group(request.user, group)
        user = self._target_user(payload.validated_data["memberId"])

        membership = Membership.objects.filter(group=group, user=user).first()
        if membership is None:
            raise NotFound("Membership between the user and the group does not exist")
        if not allowed or (
            membership.status == Membership.STATUS_CO_HOST and not is_organizer(request.user, group)
        ):
            self.permission_denied(request, message="Forbidden")

        previous = membership.status
        membership.status = new_status
        membership.save(update_fields=["status", "updated_at"])
        logger.info(
            "Membership group=%s user=%s %s -> %s",
            group.pk, user.pk, previous, new_status,
        )
        return Response(MembershipSerializer(membership).data)

    def _delete_membership(self, request, group):
        member_id = request.data.get("memberId")
        if member_id in (None, ""):
            raise ValidationError({"memberId": "memberId is required"})
        user = self._target_user(member_id)

        if user.pk != request.user.id and not is_organizer(request.user, group):
            logger.warning(
                "Denied membership delete on group=%s target=%s for user=%s",
                group.pk, user.pk, request.user.id,
            )
            raise PermissionDenied("Only the User or organizer may delete a Membership")
        if user.pk == group.organizer_id:
            raise ValidationError({"memberId": "Cannot remove the organizer"})

        membership = Membership.objects.filter(group=group, user=user).first()
        if membership is None:
            raise NotFound("Membership does not exist for this User")

        membership.delete()
        logger.info("Membership deleted group=%s user=%s by=%s", group.pk, user.pk, request.user.id)
        return Response({"message": "Successfully deleted membership from group"})


class GroupImageViewSet(mixins.DestroyModelMixin, viewsets.GenericViewSet):
    """DELETE /api/group-images/{id} (organizer or co-host)."""
    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"

    def get_object(self):
        try:
            return GroupImage.objects.select_related("group").get(pk=self.kwargs.get("pk"))
        except GroupImage.DoesNotExist:
            raise NotFound("Group Image couldn't be found")

    def destroy(self, request, *args, **kwargs):
        image = self.get_object()
        if not can_manage_group(request.user, image.group):
            logger.warning("Denied image delete on group=%s for user=%s", image.group_id, request.user.id)
            raise PermissionDenied("Forbidden")
        image.delete()
        return Response({"message": "Successfully deleted"})
