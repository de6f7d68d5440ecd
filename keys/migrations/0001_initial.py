import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="KeyRecord",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("key", models.CharField(db_index=True, max_length=100, unique=True)),
                ("name", models.CharField(max_length=255)),
                ("is_active", models.BooleanField(db_index=True, default=True)),
                (
                    "policy",
                    models.CharField(
                        choices=[
                            ("unset", "No expiry"),
                            ("fixed_date", "Fixed date"),
                            ("day", "One day"),
                            ("week", "One week"),
                            ("month", "One month"),
                            ("lifetime", "Lifetime"),
                        ],
                        default="unset",
                        max_length=20,
                    ),
                ),
                ("uses", models.PositiveIntegerField(default=0)),
                (
                    "created_at",
                    models.DateTimeField(db_index=True, default=django.utils.timezone.now),
                ),
                ("last_used_at", models.DateTimeField(blank=True, null=True)),
                ("activated_at", models.DateTimeField(blank=True, null=True)),
                ("expires_at", models.DateTimeField(blank=True, null=True)),
                ("device_id", models.CharField(blank=True, max_length=255, null=True)),
                ("device_name", models.CharField(blank=True, max_length=255, null=True)),
            ],
            options={
                "db_table": "key_records",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["is_active", "expires_at"], name="key_records_active_exp_idx"),
                ],
            },
        ),
    ]
