import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from economy.exceptions import LedgerError
from economy.models import LedgerEntry
from economy.serializers import (
    AdminCreditSerializer,
    LedgerEntrySerializer,
    WalletSerializer,
)
from economy.services import WalletService
from economy.views.params import int_query_param

logger = logging.getLogger(__name__)


class RetrieveWalletView(APIView):
    """GET /wallets/<user_id>/: Retrieve (and lazily create) a user's wallet."""

    def get(self, request, user_id, *args, **kwargs):
        try:
            wallet = WalletService.get_or_create_wallet(user_id)
        except LedgerError as exc:
            return Response(exc.as_dict(), status=exc.status_code)
        return Response(WalletSerializer(wallet).data, status=status.HTTP_200_OK)


class LedgerListView(APIView):
    """
    GET /wallets/<user_id>/transactions/: List a wallet's ledger, newest first.

    Query params:
        - kind: Filter by entry kind (gift_sent, unlock, purchase, ...)
        - limit: Maximum number of entries (default 50, max 200)
    """

    def get(self, request, user_id, *args, **kwargs):
        limit = int_query_param(request, "limit", default=50, minimum=1)
        kind = request.query_params.get("kind")
        if kind and kind.lower() not in LedgerEntry.Kind.values:
            return Response(
                {"error": f"Unknown entry kind {kind!r}."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        entries = WalletService.get_ledger(
            user_id, limit=limit, kind=kind.lower() if kind else None
        )
        return Response(LedgerEntrySerializer(entries, many=True).data)


class AdminCreditView(APIView):
    """
    POST /wallets/<user_id>/admin-credit: Operator credit.

    Request body: {"amount": <1..ADMIN_CREDIT_MAX>, "description": "", "admin_note": ""}
    """

    def post(self, request, user_id, *args, **kwargs):
        serializer = AdminCreditSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            entry = WalletService.admin_credit(
                user_id,
                serializer.validated_data["amount"],
                description=serializer.validated_data["description"],
                admin_note=serializer.validated_data["admin_note"],
            )
        except LedgerError as exc:
            return Response(exc.as_dict(), status=exc.status_code)

        return Response(
            {
                "balance": entry.balance_after,
                "transaction": LedgerEntrySerializer(entry).data,
            },
            status=status.HTTP_200_OK,
        )
