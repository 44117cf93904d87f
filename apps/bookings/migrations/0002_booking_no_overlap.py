"""
PostgreSQL exclusion constraint against overlapping bookings of one unit.

daterange(check_in, check_out, '[)') has the same half-open semantics as the
application-level overlap check, so a same-day turnover is not a conflict.
Other backends rely on serialized write transactions instead and skip it.
"""

from django.db import migrations

CONSTRAINT_NAME = "booking_no_overlap"

EXTENSION_SQL = "CREATE EXTENSION IF NOT EXISTS btree_gist;"

CREATE_SQL = f"""
ALTER TABLE bookings_booking
    ADD CONSTRAINT {CONSTRAINT_NAME}
    EXCLUDE USING gist (
        unit_id WITH =,
        daterange(check_in, check_out, '[)') WITH &&
    )
    WHERE (status IN ('pending', 'confirmed', 'completed'));
"""

DROP_SQL = f"ALTER TABLE bookings_booking DROP CONSTRAINT IF EXISTS {CONSTRAINT_NAME};"


def add_exclusion_constraint(apps, schema_editor):
    if schema_editor.connection.vendor != "postgresql":
        return
    schema_editor.execute(EXTENSION_SQL)
    schema_editor.execute(CREATE_SQL)


def drop_exclusion_constraint(apps, schema_editor):
    if schema_editor.connection.vendor != "postgresql":
        return
    # btree_gist stays installed: other indexes may depend on it.
    schema_editor.execute(DROP_SQL)


class Migration(migrations.Migration):

    dependencies = [
        ("bookings", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(add_exclusion_constraint, drop_exclusion_constraint),
    ]
