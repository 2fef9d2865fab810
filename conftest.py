from decimal import Decimal

import pytest

from apps.housing.models import HostelBlock, Room
from apps.users.models import User


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role=User.RoleChoices.STUDENT, **extra):
        counter["n"] += 1
        return User.objects.create_user(
            email=f"{role.lower()}{counter['n']}@campus.example.com",
            password="Campus-Pass-123",
            role=role,
            **extra,
        )

    return _make


@pytest.fixture
def student(make_user):
    return make_user()


@pytest.fixture
def other_student(make_user):
    return make_user()


@pytest.fixture
def admin_user(make_user):
    return make_user(User.RoleChoices.ADMIN)


@pytest.fixture
def block(db):
    return HostelBlock.objects.create(name="North Hall", location="Campus A")


@pytest.fixture
def make_room(block):
    counter = {"n": 100}

    def _make(capacity=2):
        counter["n"] += 1
        return Room.objects.create(
            block=block,
            room_number=str(counter["n"]),
            capacity=capacity,
            price_per_semester=Decimal("45000.00"),
        )

    return _make


@pytest.fixture
def room(make_room):
    return make_room(capacity=2)
