from rest_framework import serializers

from economy.catalog import COIN_PACKAGES
from economy.models import PurchaseRequest


class CreatePurchaseRequestSerializer(serializers.Serializer):
    """
    Validates purchase requests.

    Either a known ``package_id`` or explicit ``coin_amount`` and
    ``paid_amount`` must be supplied.
    """

    package_id = serializers.CharField(required=False, allow_blank=True, default="")
    coin_amount = serializers.IntegerField(required=False, min_value=1)
    paid_amount = serializers.DecimalField(
        required=False, max_digits=12, decimal_places=2, min_value=0
    )
    payment_reference = serializers.CharField(max_length=255)
    payment_method = serializers.CharField(
        max_length=64, required=False, allow_blank=True, default=""
    )

    def validate_package_id(self, value):
        if value and value not in COIN_PACKAGES:
            raise serializers.ValidationError("Invalid package ID.")
        return value

    def validate(self, attrs):
        if not attrs.get("package_id") and (
            attrs.get("coin_amount") is None or attrs.get("paid_amount") is None
        ):
            raise serializers.ValidationError(
                "Provide a package_id or both coin_amount and paid_amount."
            )
        return attrs


class PurchaseDecisionSerializer(serializers.Serializer):
    admin_note = serializers.CharField(required=False, allow_blank=True, default="")


class PurchaseRequestSerializer(serializers.ModelSerializer):
    class Meta:
        model = PurchaseRequest
        fields = (
            "id",
            "user_id",
            "package_id",
            "coin_amount",
            "paid_amount",
            "payment_reference",
            "payment_method",
            "status",
            "requested_at",
            "processed_at",
            "admin_note",
        )
        read_only_fields = fields
