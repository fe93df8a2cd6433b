from django.db import models

from economy.models.timestamped import TimestampedModel


class UserProfile(TimestampedModel):
    """
    Local mirror of a platform user, keyed by the identity provider's uid.

    Holds display fields copied into ledger rows and the cumulative gift
    counters. The counters are statistics only; the coin balance lives on
    the Wallet and nowhere else.
    """

    uid = models.CharField(max_length=128, primary_key=True)
    name = models.CharField(max_length=255, blank=True, default="")
    phone_number = models.CharField(max_length=32, blank=True, default="")
    is_active = models.BooleanField(default=True)

    gifts_sent_count = models.PositiveIntegerField(default=0)
    gifts_received_count = models.PositiveIntegerField(default=0)
    total_coins_spent_on_gifts = models.BigIntegerField(default=0)
    total_coins_earned_from_gifts = models.BigIntegerField(default=0)

    class Meta(TimestampedModel.Meta):
        db_table = "user_profiles"

    def __str__(self):
        return f"{self.name or self.uid} ({self.uid})"
