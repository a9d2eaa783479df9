# groups/permissions.py
from rest_framework.permissions import BasePermission, SAFE_METHODS
from .models import Membership


def _user_id(user):
    if not user or not getattr(user, "is_authenticated", False):
        return None
    return user.id


def is_organizer(user, group) -> bool:
    uid = _user_id(user)
    return bool(uid and group and group.organizer_id == uid)


def is_co_host(user, group) -> bool:
    uid = _user_id(user)
    if not uid or not group:
        return False
    return Membership.objects.filter(
        group=group, user_id=uid, status=Membership.STATUS_CO_HOST
    ).exists()


def can_manage_group(user, group) -> bool:
    """Organizer or co-host: may edit/delete the group's events and review attendance."""
    return is_organizer(user, group) or is_co_host(user, group)


def has_membership(user, group) -> bool:
    """Any membership row counts, pending included."""
    uid = _user_id(user)
    if not uid or not group:
        return False
    return Membership.objects.filter(group=group, user_id=uid).exists()


class IsGroupOrganizerOrReadOnly(BasePermission):
    """
    - READ: anyone
    - UPDATE/DELETE: the group organizer
    """
    message = "Forbidden"

    def has_object_permission(self, request, view, obj):
        if request.method in SAFE_METHODS:
            return True
        return is_organizer(request.user, obj)
