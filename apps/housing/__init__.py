"""Housing app package.

Hostel blocks, rooms and the room booking ledger. Each room keeps a
cached occupancy counter that always equals the number of its active
bookings; the ledger and the occupancy reconciler in ``services`` keep
the two consistent under concurrent requests.
"""
