"""Bookings app package.

This app encapsulates the booking domain: the booking model, the overlap
check behind availability queries, the transactional creation protocol
and the status lifecycle. Double booking is prevented by re-checking
overlaps inside the creating transaction and, on PostgreSQL, by an
exclusion constraint on the unit's date ranges.
"""
