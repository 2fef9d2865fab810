"""Admin registration for housing.

Occupancy is read-only here: it is maintained by the occupancy
reconciler, and booking statuses should be changed through the API so
the counter moves with them. Bookings cannot be added or deleted here
for the same reason.
"""

from __future__ import annotations

from django.contrib import admin

from .models import Booking, HostelBlock, Room


class RoomInline(admin.TabularInline):
    model = Room
    extra = 0
    fields = ("room_number", "capacity", "current_occupancy", "price_per_semester")
    readonly_fields = ("current_occupancy",)


@admin.register(HostelBlock)
class HostelBlockAdmin(admin.ModelAdmin):
    list_display = ("name", "location", "gender_restriction", "created_at")
    list_filter = ("gender_restriction",)
    search_fields = ("name", "location")
    inlines = [RoomInline]


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ("room_number", "block", "capacity", "current_occupancy", "price_per_semester")
    list_filter = ("block",)
    search_fields = ("room_number", "block__name")
    readonly_fields = ("current_occupancy", "created_at")


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ("id", "student", "room", "semester", "status", "created_at")
    list_filter = ("status", "semester")
    search_fields = ("student__email", "room__room_number", "semester")
    readonly_fields = ("student", "room", "semester", "status", "created_at", "updated_at")

    def has_delete_permission(self, request, obj=None):  # type: ignore
        return False

    def has_add_permission(self, request):  # type: ignore
        return False
