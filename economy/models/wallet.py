from django.db import models

from economy.models.timestamped import TimestampedModel
from economy.models.profile import UserProfile


class Wallet(TimestampedModel):
    """
    A user's single authoritative coin balance.

    The wallet id is the owner's uid. Balance is an integer coin count and
    may never go below zero; the check constraint backs the conditional
    updates performed by WalletService. Name and phone are copied from the
    profile when the wallet is created so ledger rows stay readable.
    """

    wallet_id = models.CharField(max_length=128, primary_key=True)
    user = models.OneToOneField(
        UserProfile,
        on_delete=models.PROTECT,
        related_name="wallet",
    )
    user_name = models.CharField(max_length=255, blank=True, default="")
    user_phone_number = models.CharField(max_length=32, blank=True, default="")
    balance = models.BigIntegerField(default=0)

    class Meta(TimestampedModel.Meta):
        db_table = "wallets"
        constraints = [
            models.CheckConstraint(
                condition=models.Q(balance__gte=0),
                name="wallet_balance_non_negative",
            ),
        ]

    def __str__(self):
        return f"Wallet {self.wallet_id} (balance={self.balance})"
