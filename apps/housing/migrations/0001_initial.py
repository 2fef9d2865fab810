import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="HostelBlock",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=120)),
                ("location", models.CharField(blank=True, help_text="e.g. North Wing, Campus A", max_length=255)),
                (
                    "gender_restriction",
                    models.CharField(
                        choices=[("MALE", "Male"), ("FEMALE", "Female"), ("MIXED", "Mixed")],
                        default="MIXED",
                        max_length=10,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name": "Hostel block",
                "verbose_name_plural": "Hostel blocks",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Room",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("room_number", models.CharField(max_length=20)),
                (
                    "capacity",
                    models.PositiveSmallIntegerField(
                        default=2, validators=[django.core.validators.MinValueValidator(1)]
                    ),
                ),
                (
                    "current_occupancy",
                    models.PositiveSmallIntegerField(
                        default=0,
                        editable=False,
                        help_text="Active bookings against the room. Maintained by the occupancy reconciler.",
                    ),
                ),
                ("price_per_semester", models.DecimalField(decimal_places=2, max_digits=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "block",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="rooms",
                        to="housing.hostelblock",
                    ),
                ),
            ],
            options={
                "verbose_name": "Room",
                "verbose_name_plural": "Rooms",
                "ordering": ["block__name", "room_number"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(capacity__gt=0),
                        name="room_capacity_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(current_occupancy__gte=0)
                        & models.Q(current_occupancy__lte=models.F("capacity")),
                        name="room_occupancy_within_capacity",
                    ),
                    models.UniqueConstraint(
                        fields=("block", "room_number"), name="unique_room_number_per_block"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("semester", models.CharField(help_text='e.g. "Fall 2025"', max_length=32)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending"),
                            ("CONFIRMED", "Confirmed"),
                            ("REJECTED", "Rejected"),
                            ("CANCELLED", "Cancelled"),
                        ],
                        default="PENDING",
                        max_length=16,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "room",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bookings",
                        to="housing.room",
                    ),
                ),
                (
                    "student",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="room_bookings",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Room booking",
                "verbose_name_plural": "Room bookings",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["room", "status"], name="booking_room_status_idx"),
                    models.Index(fields=["student", "semester"], name="booking_student_semester_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(status__in=["PENDING", "CONFIRMED"]),
                        fields=("student", "semester"),
                        name="one_active_booking_per_semester",
                    ),
                ],
            },
        ),
    ]
