"""
KeyRecord Django ORM model.

This is the infrastructure layer model for issued keys.
Domain entities are in keys.domain.key_record.
"""
from django.db import models
from django.utils import timezone

POLICY_CHOICES = [
    ("unset", "No expiry"),
    ("fixed_date", "Fixed date"),
    ("day", "One day"),
    ("week", "One week"),
    ("month", "One month"),
    ("lifetime", "Lifetime"),
]


class KeyRecord(models.Model):
    """
    An issued key and its lifecycle state.

    Rows are written only through the key store, never edited directly.
    """

    key = models.CharField(max_length=100, unique=True, db_index=True)
    name = models.CharField(max_length=255)
    is_active = models.BooleanField(default=True, db_index=True)
    policy = models.CharField(max_length=20, choices=POLICY_CHOICES, default="unset")
    uses = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    last_used_at = models.DateTimeField(null=True, blank=True)
    activated_at = models.DateTimeField(null=True, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True)
    device_id = models.CharField(max_length=255, null=True, blank=True)
    device_name = models.CharField(max_length=255, null=True, blank=True)

    class Meta:
        db_table = "key_records"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["is_active", "expires_at"], name="key_records_active_exp_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.key[:8]}...)"
