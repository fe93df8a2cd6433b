from rest_framework import serializers

from economy.catalog import GIFT_CATALOG
from economy.models import GiftTransfer


class SendGiftSerializer(serializers.Serializer):
    """Validates gift-send requests."""

    recipient_id = serializers.CharField(max_length=128)
    gift_id = serializers.CharField(max_length=64)
    message = serializers.CharField(
        max_length=500, required=False, allow_null=True, allow_blank=True
    )
    context = serializers.CharField(
        max_length=64, required=False, allow_null=True, allow_blank=True
    )

    def validate_gift_id(self, value):
        if value not in GIFT_CATALOG:
            raise serializers.ValidationError("Invalid gift ID.")
        return value


class GiftTransferSerializer(serializers.ModelSerializer):
    sender_tx_id = serializers.UUIDField(source="sender_tx.transaction_id", read_only=True)
    recipient_tx_id = serializers.UUIDField(
        source="recipient_tx.transaction_id", read_only=True
    )
    type = serializers.SerializerMethodField()

    class Meta:
        model = GiftTransfer
        fields = (
            "id",
            "type",
            "sender_id",
            "sender_name",
            "recipient_id",
            "recipient_name",
            "gift_id",
            "gift_name",
            "gift_emoji",
            "gift_rarity",
            "price",
            "recipient_amount",
            "commission",
            "commission_rate",
            "sender_tx_id",
            "recipient_tx_id",
            "message",
            "context",
            "status",
            "created_at",
        )
        read_only_fields = fields

    def get_type(self, obj):
        user_id = self.context.get("user_id")
        return obj.role_of(user_id) if user_id else None
