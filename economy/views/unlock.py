from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from economy.exceptions import AlreadyUnlocked, LedgerError
from economy.serializers import UnlockContentSerializer
from economy.services import UnlockService


class UnlockView(APIView):
    """
    GET /wallets/<user_id>/unlocks/: Content ids the user has unlocked.
    POST /wallets/<user_id>/unlocks/: Unlock a premium content item.

    Request body: {"content_id": "..."}
    """

    def get(self, request, user_id, *args, **kwargs):
        content_ids = UnlockService.unlocked_content_ids(user_id)
        return Response({"content_ids": content_ids, "total": len(content_ids)})

    def post(self, request, user_id, *args, **kwargs):
        serializer = UnlockContentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        content_id = serializer.validated_data["content_id"]

        try:
            result = UnlockService.unlock_content(user_id, content_id)
        except AlreadyUnlocked as exc:
            return Response(
                {
                    "unlocked": False,
                    "already_unlocked": True,
                    "content_id": content_id,
                    "balance": exc.balance,
                },
                status=status.HTTP_200_OK,
            )
        except LedgerError as exc:
            return Response(exc.as_dict(), status=exc.status_code)

        return Response(
            {
                "unlocked": True,
                "already_unlocked": False,
                "content_id": content_id,
                "cost": result.entitlement.cost,
                "balance": result.balance,
                "transaction_id": str(result.entitlement.ledger_entry_id),
            },
            status=status.HTTP_201_CREATED,
        )
