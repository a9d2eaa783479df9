# groups/models.py
from django.conf import settings
from django.db import models
from django.db.models import Count, OuterRef, Q, Subquery


class GroupQuerySet(models.QuerySet):
    def with_listing_fields(self):
        """Annotate `num_members` and `preview_image` for list/detail views."""
        preview = (
            GroupImage.objects.filter(group=OuterRef("pk"), preview=True)
            .order_by("id")
            .values("url")[:1]
        )
        return self.annotate(
            num_members=Count(
                "memberships",
                filter=Q(memberships__status__in=Membership.ACTIVE_STATUSES),
                distinct=True,
            ),
            preview_image=Subquery(preview),
        )


class Group(models.Model):
    organizer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="groups_organized",
    )
    name = models.CharField(max_length=60)
    about = models.TextField(blank=True)
    private = models.BooleanField(default=False)
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = GroupQuerySet.as_manager()

    class Meta:
        ordering = ["id"]
        indexes = [
            models.Index(fields=["organizer"], name="group_organizer_idx"),
        ]

    def __str__(self):
        return self.name


class GroupImage(models.Model):
    group = models.ForeignKey(Group, on_delete=models.CASCADE, related_name="images")
    url = models.URLField(max_length=500)
    preview = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"GroupImage<{self.group_id}:{self.url}>"


class Venue(models.Model):
    group = models.ForeignKey(Group, on_delete=models.CASCADE, related_name="venues")
    address = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.address or self.city}, {self.state}"


class Membership(models.Model):
    STATUS_PENDING = "pending"
    STATUS_MEMBER = "member"
    STATUS_CO_HOST = "co-host"
    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_MEMBER, "Member"),
        (STATUS_CO_HOST, "Co-host"),
    ]
    # statuses that count as belonging to the group
    ACTIVE_STATUSES = (STATUS_MEMBER, STATUS_CO_HOST)

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="memberships")
    group = models.ForeignKey(Group, on_delete=models.CASCADE, related_name="memberships")
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ("user", "group")
        indexes = [
            models.Index(fields=["group", "status"], name="membership_group_status_idx"),
        ]

    def __str__(self):
        return f"{self.user} → {self.group} ({self.status})"
