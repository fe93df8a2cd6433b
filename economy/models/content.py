from django.conf import settings
from django.db import models
from django.utils import timezone

from economy.models.timestamped import TimestampedModel
from economy.models.ledger import LedgerEntry
from economy.models.profile import UserProfile


class Content(TimestampedModel):
    """
    Local mirror of a priced catalog item (a drama series).

    ``unlock_count`` only grows and only inside UnlockService's atomic unit,
    next to the debit that paid for it. ``view_count`` is a best-effort
    counter bumped by a background task.
    """

    content_id = models.CharField(max_length=128, primary_key=True)
    title = models.CharField(max_length=255)
    content_class = models.CharField(max_length=32, default="drama")
    is_premium = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    unlock_count = models.PositiveBigIntegerField(default=0)
    view_count = models.PositiveBigIntegerField(default=0)

    class Meta(TimestampedModel.Meta):
        db_table = "contents"

    def __str__(self):
        return f"{self.title} ({self.content_id})"

    @property
    def unlock_cost(self):
        costs = getattr(settings, "CONTENT_UNLOCK_COSTS", {})
        return costs.get(self.content_class, getattr(settings, "DEFAULT_UNLOCK_COST", 99))


class UnlockEntitlement(models.Model):
    """
    Membership of a content item in a user's unlocked set.

    One row per (user, content), enforced by a unique constraint so a racing
    second unlock cannot insert a duplicate.
    """

    user = models.ForeignKey(
        UserProfile,
        on_delete=models.CASCADE,
        related_name="unlocked_items",
    )
    content = models.ForeignKey(
        Content,
        on_delete=models.CASCADE,
        related_name="entitlements",
    )
    cost = models.PositiveIntegerField()
    ledger_entry = models.OneToOneField(
        LedgerEntry,
        on_delete=models.PROTECT,
        related_name="+",
    )
    created_at = models.DateTimeField(default=timezone.now, editable=False)

    class Meta:
        db_table = "unlock_entitlements"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "content"], name="unique_unlock_per_user_content"
            ),
        ]

    def __str__(self):
        return f"{self.user_id} unlocked {self.content_id}"
