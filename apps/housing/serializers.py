"""Serializers for the housing domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Booking, HostelBlock, Room


class HostelBlockSerializer(serializers.ModelSerializer):
    class Meta:
        model = HostelBlock
        fields = ["id", "name", "location", "gender_restriction"]


class RoomSerializer(serializers.ModelSerializer):
    """Room with derived availability."""

    block = HostelBlockSerializer(read_only=True)
    spots_left = serializers.IntegerField(read_only=True)
    is_available = serializers.BooleanField(read_only=True)

    class Meta:
        model = Room
        fields = [
            "id",
            "block",
            "room_number",
            "capacity",
            "current_occupancy",
            "spots_left",
            "is_available",
            "price_per_semester",
        ]
        read_only_fields = fields


class BookingCreateSerializer(serializers.Serializer):
    """Input for a student booking request.

    ``room`` is a plain id so that an unknown room surfaces as the
    ledger's RoomNotFound (404) rather than a field validation error.
    """

    room = serializers.IntegerField(min_value=1)
    semester = serializers.CharField(max_length=32, trim_whitespace=True)

    def validate_semester(self, value: str) -> str:
        if not value:
            raise serializers.ValidationError("Semester is required.")
        return value


class BookingStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Booking.Status.choices)


class BookingSerializer(serializers.ModelSerializer):
    """Booking as returned by the API."""

    student_id = serializers.ReadOnlyField(source="student.id")
    room_id = serializers.ReadOnlyField(source="room.id")
    room_number = serializers.ReadOnlyField(source="room.room_number")
    block_name = serializers.ReadOnlyField(source="room.block.name")

    class Meta:
        model = Booking
        fields = [
            "id",
            "student_id",
            "room_id",
            "room_number",
            "block_name",
            "semester",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
