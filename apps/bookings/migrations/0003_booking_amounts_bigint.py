from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("bookings", "0002_booking_no_overlap"),
    ]

    operations = [
        migrations.AlterField(
            model_name="booking",
            name="nightly_rate",
            field=models.PositiveBigIntegerField(
                help_text="Unit price per night at booking time, in minor currency units.",
            ),
        ),
        migrations.AlterField(
            model_name="booking",
            name="base_amount",
            field=models.PositiveBigIntegerField(default=0),
        ),
        migrations.AlterField(
            model_name="booking",
            name="add_ons_amount",
            field=models.PositiveBigIntegerField(default=0),
        ),
        migrations.AlterField(
            model_name="booking",
            name="total_amount",
            field=models.PositiveBigIntegerField(default=0),
        ),
    ]
