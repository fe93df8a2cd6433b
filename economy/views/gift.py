import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from economy.catalog import GIFT_CATALOG
from economy.exceptions import LedgerError
from economy.serializers import GiftTransferSerializer, SendGiftSerializer
from economy.services import GiftService
from economy.utils import calculate_commission, get_commission_percent
from economy.views.params import int_query_param

logger = logging.getLogger(__name__)


class GiftView(APIView):
    """
    GET /wallets/<user_id>/gifts/: Gifts the user sent or received.
    POST /wallets/<user_id>/gifts/: Send a catalog gift from the user.

    Request body: {"recipient_id": "...", "gift_id": "...", "message": "...", "context": "..."}
    """

    def get(self, request, user_id, *args, **kwargs):
        limit = int_query_param(request, "limit", default=50, minimum=1)
        offset = int_query_param(request, "offset", default=0, maximum=100000)
        transfers = GiftService.get_history(user_id, limit=limit, offset=offset)
        return Response(
            GiftTransferSerializer(transfers, many=True, context={"user_id": user_id}).data
        )

    def post(self, request, user_id, *args, **kwargs):
        serializer = SendGiftSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = GiftService.send_catalog_gift(
                sender_id=user_id,
                recipient_id=serializer.validated_data["recipient_id"],
                gift_id=serializer.validated_data["gift_id"],
                message=serializer.validated_data.get("message") or None,
                context=serializer.validated_data.get("context") or None,
            )
        except LedgerError as exc:
            return Response(exc.as_dict(), status=exc.status_code)

        return Response(
            {
                "gift_transfer": GiftTransferSerializer(
                    result.gift_transfer, context={"user_id": user_id}
                ).data,
                "sender_balance": result.sender_balance,
                "recipient_balance": result.recipient_balance,
                "platform_commission": result.commission,
            },
            status=status.HTTP_201_CREATED,
        )


class GiftStatsView(APIView):
    """GET /wallets/<user_id>/gifts/stats/: Per-user gift statistics."""

    def get(self, request, user_id, *args, **kwargs):
        try:
            stats = GiftService.get_stats(user_id)
        except LedgerError as exc:
            return Response(exc.as_dict(), status=exc.status_code)
        return Response(stats)


class GiftCatalogView(APIView):
    """GET /gifts/catalog/: Available gifts with their commission split."""

    def get(self, request, *args, **kwargs):
        rate = get_commission_percent()
        gifts = []
        for gift in sorted(GIFT_CATALOG.values(), key=lambda g: (g.price, g.gift_id)):
            recipient_amount, commission = calculate_commission(gift.price, rate)
            gifts.append(
                {
                    "id": gift.gift_id,
                    "name": gift.name,
                    "emoji": gift.emoji,
                    "price": gift.price,
                    "rarity": gift.rarity,
                    "recipient_amount": recipient_amount,
                    "platform_commission": commission,
                }
            )
        return Response({"gifts": gifts, "total": len(gifts), "commission_rate": rate})


class GiftTransferDetailView(APIView):
    """GET /gifts/<transfer_id>/: Retrieve a single gift transfer."""

    def get(self, request, transfer_id, *args, **kwargs):
        try:
            transfer = GiftService.get_transfer(transfer_id)
        except LedgerError as exc:
            return Response(exc.as_dict(), status=exc.status_code)
        return Response(GiftTransferSerializer(transfer).data)
