"""Notifications app package.

In-app notifications for campus users. Other apps never call this app
directly for delivery: they publish domain events, and the handlers in
``handlers`` turn those events into notifications after the originating
transaction has committed.
"""
