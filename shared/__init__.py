"""
Shared Kernel

Building blocks shared by every app: domain events, the unit of work
that ties event publishing to transaction commit, the message bus and
the API error mapping.
"""
