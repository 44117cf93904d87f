import uuid

from django.db import migrations, models

import apps.units.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Unit",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                (
                    "nightly_rate",
                    models.PositiveIntegerField(help_text="Price per night in minor currency units (cents)."),
                ),
                ("max_guests", models.PositiveSmallIntegerField(default=1)),
                ("currency", models.CharField(default=apps.units.models.default_currency, max_length=3)),
                (
                    "status",
                    models.CharField(
                        choices=[("draft", "Draft"), ("active", "Active"), ("inactive", "Inactive")],
                        default="draft",
                        max_length=20,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Unit",
                "verbose_name_plural": "Units",
                "ordering": ["name"],
                "indexes": [models.Index(fields=["status"], name="unit_status_idx")],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(max_guests__gte=1), name="unit_capacity_positive"),
                ],
            },
        ),
    ]
