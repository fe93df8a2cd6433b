from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from economy.exceptions import LedgerError
from economy.serializers import (
    CreatePurchaseRequestSerializer,
    PurchaseDecisionSerializer,
    PurchaseRequestSerializer,
)
from economy.services import PurchaseService
from economy.views.params import int_query_param


class CreatePurchaseRequestView(APIView):
    """
    POST /wallets/<user_id>/purchases/: Submit a coin purchase for verification.

    Request body: {"package_id": "coins_99", "payment_reference": "..."}
    or {"coin_amount": 100, "paid_amount": "0.99", "payment_reference": "..."}
    """

    def post(self, request, user_id, *args, **kwargs):
        serializer = CreatePurchaseRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            purchase = PurchaseService.create_request(
                user_id,
                coin_amount=data.get("coin_amount"),
                paid_amount=data.get("paid_amount"),
                payment_reference=data["payment_reference"],
                payment_method=data["payment_method"],
                package_id=data["package_id"],
            )
        except LedgerError as exc:
            return Response(exc.as_dict(), status=exc.status_code)

        return Response(
            PurchaseRequestSerializer(purchase).data, status=status.HTTP_201_CREATED
        )


class PendingPurchaseListView(APIView):
    """GET /purchases/pending/: Requests awaiting operator verification."""

    def get(self, request, *args, **kwargs):
        limit = int_query_param(request, "limit", default=50, minimum=1)
        pending = PurchaseService.get_pending(limit=limit)
        return Response(PurchaseRequestSerializer(pending, many=True).data)


class ApprovePurchaseView(APIView):
    """POST /purchases/<request_id>/approve: Approve and credit the coins."""

    def post(self, request, request_id, *args, **kwargs):
        serializer = PurchaseDecisionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            purchase = PurchaseService.approve(
                request_id, note=serializer.validated_data["admin_note"]
            )
        except LedgerError as exc:
            return Response(exc.as_dict(), status=exc.status_code)

        return Response(
            {
                "request": PurchaseRequestSerializer(purchase).data,
                "balance": purchase.credit_tx.balance_after,
                "transaction_id": str(purchase.credit_tx_id),
            },
            status=status.HTTP_200_OK,
        )


class RejectPurchaseView(APIView):
    """POST /purchases/<request_id>/reject: Reject without crediting."""

    def post(self, request, request_id, *args, **kwargs):
        serializer = PurchaseDecisionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            purchase = PurchaseService.reject(
                request_id, note=serializer.validated_data["admin_note"]
            )
        except LedgerError as exc:
            return Response(exc.as_dict(), status=exc.status_code)

        return Response(PurchaseRequestSerializer(purchase).data, status=status.HTTP_200_OK)
