import uuid

from django.db import models
from django.db.models import F
from django.utils import timezone

from economy.models.ledger import LedgerEntry


class GiftTransfer(models.Model):
    """
    One gift-send event: a three-way split of the gift price.

    The sender pays ``price``; the recipient receives ``recipient_amount``;
    the platform keeps ``commission``. The two ledger entries written for the
    sender debit and recipient credit are linked here. Names are copied at
    send time so history stays readable after profile changes.
    """

    class Status(models.TextChoices):
        COMPLETED = "completed", "Completed"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    sender_id = models.CharField(max_length=128, db_index=True)
    sender_name = models.CharField(max_length=255, blank=True, default="")
    recipient_id = models.CharField(max_length=128, db_index=True)
    recipient_name = models.CharField(max_length=255, blank=True, default="")
    gift_id = models.CharField(max_length=64)
    gift_name = models.CharField(max_length=128)
    gift_emoji = models.CharField(max_length=32, blank=True, default="")
    gift_rarity = models.CharField(max_length=16, blank=True, default="")
    price = models.PositiveBigIntegerField()
    recipient_amount = models.PositiveBigIntegerField()
    commission = models.PositiveBigIntegerField()
    commission_rate = models.PositiveSmallIntegerField(
        help_text="Platform commission in percent of the gift price.",
    )
    sender_tx = models.OneToOneField(
        LedgerEntry,
        on_delete=models.PROTECT,
        related_name="+",
    )
    recipient_tx = models.OneToOneField(
        LedgerEntry,
        on_delete=models.PROTECT,
        related_name="+",
    )
    message = models.CharField(max_length=500, null=True, blank=True)
    context = models.CharField(max_length=64, null=True, blank=True)
    status = models.CharField(
        max_length=16,
        choices=Status.choices,
        default=Status.COMPLETED,
    )
    created_at = models.DateTimeField(default=timezone.now, editable=False)

    class Meta:
        db_table = "gift_transfers"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["sender_id", "-created_at"], name="idx_gift_sender_created"),
            models.Index(fields=["recipient_id", "-created_at"], name="idx_gift_recipient_created"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price=F("recipient_amount") + F("commission")),
                name="gift_transfer_price_conserved",
            ),
        ]

    def __str__(self):
        return (
            f"GiftTransfer {self.id} | {self.sender_id} -> {self.recipient_id} | "
            f"{self.gift_name} ({self.price})"
        )

    def role_of(self, user_id):
        if self.sender_id == user_id:
            return "sent"
        if self.recipient_id == user_id:
            return "received"
        return ""


class CommissionRecord(models.Model):
    """Platform earnings from one gift, kept for revenue reporting only."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    gift_transfer = models.OneToOneField(
        GiftTransfer,
        on_delete=models.PROTECT,
        related_name="commission_record",
    )
    commission_amount = models.PositiveBigIntegerField()
    original_price = models.PositiveBigIntegerField()
    rate = models.PositiveSmallIntegerField()
    sender_id = models.CharField(max_length=128)
    recipient_id = models.CharField(max_length=128)
    gift_name = models.CharField(max_length=128, blank=True, default="")
    created_at = models.DateTimeField(default=timezone.now, editable=False)

    class Meta:
        db_table = "commission_records"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["created_at"], name="idx_commission_created"),
        ]

    def __str__(self):
        return f"Commission {self.commission_amount} on {self.original_price}"
