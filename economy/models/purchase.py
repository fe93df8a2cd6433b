import uuid
from datetime import timedelta

from django.db import models
from django.utils import timezone

from economy.models.ledger import LedgerEntry


class PurchaseRequest(models.Model):
    """
    A user's claim to have paid for coins outside the platform.

    Requests start pending operator verification and end approved or
    rejected. Approval is the only transition that credits the wallet, and
    the credit entry is linked here.
    """

    class Status(models.TextChoices):
        PENDING = "pending_admin_verification", "Pending admin verification"
        APPROVED = "approved", "Approved"
        REJECTED = "rejected", "Rejected"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.CharField(max_length=128, db_index=True)
    package_id = models.CharField(max_length=32, blank=True, default="")
    coin_amount = models.PositiveBigIntegerField()
    paid_amount = models.DecimalField(max_digits=12, decimal_places=2)
    payment_reference = models.CharField(max_length=255)
    payment_method = models.CharField(max_length=64, blank=True, default="")
    status = models.CharField(
        max_length=32,
        choices=Status.choices,
        default=Status.PENDING,
    )
    requested_at = models.DateTimeField(default=timezone.now, editable=False)
    processed_at = models.DateTimeField(null=True, blank=True)
    admin_note = models.TextField(null=True, blank=True)
    credit_tx = models.OneToOneField(
        LedgerEntry,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        db_table = "purchase_requests"
        ordering = ["-requested_at"]
        indexes = [
            models.Index(fields=["status", "requested_at"], name="idx_purchase_status_requested"),
        ]

    def __str__(self):
        return (
            f"PurchaseRequest {self.id} | {self.user_id} | "
            f"{self.coin_amount} coins | {self.status}"
        )

    @property
    def is_pending(self):
        return self.status == self.Status.PENDING

    @classmethod
    def get_pending(cls):
        return cls.objects.filter(status=cls.Status.PENDING)

    @classmethod
    def get_stale_pending(cls, max_age_days):
        """Return pending requests older than ``max_age_days``."""
        cutoff = timezone.now() - timedelta(days=max_age_days)
        return cls.get_pending().filter(requested_at__lt=cutoff)
