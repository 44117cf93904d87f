"""
Shared Kernel

Base classes and utilities shared by the users, units and bookings apps:
value objects, domain events, error taxonomy and the unit of work.
"""
