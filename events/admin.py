"""
Admin configuration for the events app.
"""
from django.contrib import admin

from .models import Attendance, Event, EventImage


class EventImageInline(admin.TabularInline):
    model = EventImage
    extra = 0


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "group", "type", "start_date", "capacity", "price")
    list_filter = ("type", "start_date")
    search_fields = ("name", "group__name")
    inlines = [EventImageInline]


@admin.register(Attendance)
class AttendanceAdmin(admin.ModelAdmin):
    list_display = ("id", "event", "user", "status", "updated_at")
    list_filter = ("status",)
    search_fields = ("event__name", "user__email", "user__username")
