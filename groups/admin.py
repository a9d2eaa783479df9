# groups/admin.py
from django.contrib import admin
from .models import Group, GroupImage, Membership, Venue


class GroupImageInline(admin.TabularInline):
    model = GroupImage
    extra = 0


@admin.register(Group)
class GroupAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'organizer', 'private', 'city', 'state', 'created_at')
    list_filter = ('private', 'state')
    search_fields = ('name', 'about', 'city')
    readonly_fields = ('created_at', 'updated_at')
    inlines = [GroupImageInline]


@admin.register(Venue)
class VenueAdmin(admin.ModelAdmin):
    list_display = ('id', 'group', 'address', 'city', 'state')
    search_fields = ('group__name', 'city')


@admin.register(Membership)
class MembershipAdmin(admin.ModelAdmin):
    list_display = ('id', 'group', 'user', 'status', 'created_at')
    list_filter = ('status',)
    search_fields = ('group__name', 'user__email', 'user__username')
