"""Units app package.

Holds the lodging unit catalog record: nightly rate, occupant capacity
and publication status. Catalog editing lives outside the booking core,
which only reads units.
"""
