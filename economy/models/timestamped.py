from django.db import models


class TimestampedModel(models.Model):
    """
    Mutable economy records (wallets, profiles, contents) carry creation and
    last-change times. Ledger rows are append-only and only have created_at.
    """

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ["-created_at"]
