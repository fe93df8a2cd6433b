import uuid

from django.db import models
from django.db.models import F, Sum
from django.utils import timezone

from economy.exceptions import LedgerEntryImmutable
from economy.models.wallet import Wallet


class LedgerEntryQuerySet(models.QuerySet):
    def update(self, **kwargs):
        raise LedgerEntryImmutable("Ledger entries cannot be updated.")

    def delete(self):
        raise LedgerEntryImmutable("Ledger entries cannot be deleted.")


class LedgerEntry(models.Model):
    """
    One immutable balance change on one wallet.

    Amounts are signed: credits are positive, debits negative, so the sum of
    a wallet's entries always equals its balance. Every row satisfies
    balance_after == balance_before + amount, enforced in the database.
    Rows are written by WalletService in the same atomic unit as the balance
    change and are never updated or deleted afterwards.
    """

    class Kind(models.TextChoices):
        CREDIT = "credit", "Credit"
        DEBIT = "debit", "Debit"
        COMMISSION = "commission", "Commission"
        PURCHASE = "purchase", "Purchase"
        UNLOCK = "unlock", "Unlock"
        GIFT_SENT = "gift_sent", "Gift sent"
        GIFT_RECEIVED = "gift_received", "Gift received"
        ADMIN_CREDIT = "admin_credit", "Admin credit"

    transaction_id = models.UUIDField(
        primary_key=True, default=uuid.uuid4, editable=False
    )
    wallet = models.ForeignKey(
        Wallet,
        on_delete=models.PROTECT,
        related_name="entries",
    )
    user_id = models.CharField(max_length=128, db_index=True)
    user_name = models.CharField(max_length=255, blank=True, default="")
    kind = models.CharField(max_length=16, choices=Kind.choices)
    amount = models.BigIntegerField()
    balance_before = models.BigIntegerField()
    balance_after = models.BigIntegerField()
    description = models.CharField(max_length=255, blank=True, default="")
    reference_id = models.CharField(
        max_length=128,
        null=True,
        blank=True,
        db_index=True,
        help_text="Gift transfer id, unlocked content id or purchase request id.",
    )
    metadata = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(default=timezone.now, editable=False)

    objects = LedgerEntryQuerySet.as_manager()

    class Meta:
        db_table = "wallet_transactions"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["wallet", "-created_at"], name="idx_ledger_wallet_created"),
            models.Index(fields=["kind"], name="idx_ledger_kind"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(balance_after=F("balance_before") + F("amount")),
                name="ledger_entry_balance_arithmetic",
            ),
            models.CheckConstraint(
                condition=models.Q(balance_after__gte=0),
                name="ledger_entry_balance_after_non_negative",
            ),
        ]

    def __str__(self):
        sign = "+" if self.amount > 0 else ""
        return (
            f"LedgerEntry {self.transaction_id} | {self.kind} | "
            f"{sign}{self.amount} -> {self.balance_after}"
        )

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise LedgerEntryImmutable("Ledger entries cannot be updated.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise LedgerEntryImmutable("Ledger entries cannot be deleted.")

    @classmethod
    def sum_for_wallet(cls, wallet_id) -> int:
        """Return the sum of every entry amount written against the wallet."""
        total = cls.objects.filter(wallet_id=wallet_id).aggregate(total=Sum("amount"))
        return total["total"] or 0
