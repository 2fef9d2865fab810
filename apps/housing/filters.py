"""FilterSet definitions for housing listings."""

from __future__ import annotations

import django_filters  # type: ignore
from django.db.models import F  # type: ignore

from .models import Booking, Room


class BookingFilterSet(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=Booking.Status.choices)
    semester = django_filters.CharFilter(field_name="semester", lookup_expr="iexact")
    room = django_filters.NumberFilter(field_name="room_id")

    class Meta:
        model = Booking
        fields = ["status", "semester", "room"]


class RoomFilterSet(django_filters.FilterSet):
    block = django_filters.NumberFilter(field_name="block_id")
    available = django_filters.BooleanFilter(method="filter_available")
    price_max = django_filters.NumberFilter(field_name="price_per_semester", lookup_expr="lte")

    class Meta:
        model = Room
        fields = ["block", "available", "price_max"]

    def filter_available(self, queryset, name, value):  # type: ignore
        if value is None:
            return queryset
        if value:
            return queryset.filter(current_occupancy__lt=F("capacity"))
        return queryset.filter(current_occupancy__gte=F("capacity"))
