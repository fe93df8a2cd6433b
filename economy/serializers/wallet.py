from django.conf import settings
from rest_framework import serializers

from economy.models import LedgerEntry, Wallet


class WalletSerializer(serializers.ModelSerializer):
    class Meta:
        model = Wallet
        fields = ("wallet_id", "user_id", "user_name", "balance", "created_at", "updated_at")
        read_only_fields = fields


class LedgerEntrySerializer(serializers.ModelSerializer):
    """Read-only serializer for ledger entries."""

    class Meta:
        model = LedgerEntry
        fields = (
            "transaction_id",
            "wallet_id",
            "user_id",
            "kind",
            "amount",
            "balance_before",
            "balance_after",
            "description",
            "reference_id",
            "metadata",
            "created_at",
        )
        read_only_fields = fields


class AdminCreditSerializer(serializers.Serializer):
    """Validates operator credit requests."""

    amount = serializers.IntegerField(min_value=1)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    admin_note = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_amount(self, value):
        max_amount = getattr(settings, "ADMIN_CREDIT_MAX", 10000)
        if value > max_amount:
            raise serializers.ValidationError(
                f"Amount must not exceed {max_amount} coins."
            )
        return value
