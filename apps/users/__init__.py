"""Users app package.

Defines the campus user model. Every user has a single role (student,
admin, faculty or landlord) which the housing app uses to decide who
may book rooms and who may move bookings between statuses. Use
``apps.users.models.CustomUser`` as the AUTH_USER_MODEL throughout the
project.
"""
