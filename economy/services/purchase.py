import logging
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.utils import timezone

from economy.catalog import get_coin_package
from economy.exceptions import (
    AlreadyProcessed,
    InvalidAmount,
    InvalidPaidAmount,
    RequestNotFound,
    TransientError,
    UserNotFound,
)
from economy.models import LedgerEntry, PurchaseRequest, UserProfile
from economy.services.wallet import WalletService
from economy.utils import ledger_unit

logger = logging.getLogger(__name__)


class PurchaseService:
    """
    Turns operator-verified coin purchases into wallet credits.

    pending_admin_verification -> approved | rejected. The request row is
    locked while it is processed, and approval credits the wallet and flips
    the status in the same unit, so a request can be credited at most once.
    """

    @staticmethod
    def create_request(
        user_id: str,
        coin_amount: int = None,
        paid_amount=None,
        payment_reference: str = "",
        payment_method: str = "",
        package_id: str = "",
    ) -> PurchaseRequest:
        """
        Record a pending purchase request.

        Either ``package_id`` or both ``coin_amount`` and ``paid_amount`` must
        be given; a package fixes the amounts.

        Raises:
            UserNotFound: If no profile exists for the user.
            InvalidAmount: If the coin amount is not positive.
            InvalidPaidAmount: If the paid amount is negative or not a number.
        """
        if package_id:
            package = get_coin_package(package_id)
            coin_amount = package.coins
            paid_amount = package.price

        if isinstance(coin_amount, bool) or not isinstance(coin_amount, int) or coin_amount <= 0:
            raise InvalidAmount(coin_amount)
        try:
            paid = Decimal(str(paid_amount))
        except InvalidOperation:
            raise InvalidPaidAmount(paid_amount)
        if not paid.is_finite() or paid < 0:
            raise InvalidPaidAmount(paid_amount)

        if not UserProfile.objects.filter(pk=user_id).exists():
            raise UserNotFound(user_id)

        request = PurchaseRequest.objects.create(
            user_id=user_id,
            package_id=package_id,
            coin_amount=coin_amount,
            paid_amount=paid,
            payment_reference=payment_reference,
            payment_method=payment_method,
        )
        logger.info(
            "Purchase request created: request=%s user=%s coins=%d paid=%s ref=%s",
            request.id,
            user_id,
            coin_amount,
            request.paid_amount,
            payment_reference,
        )
        return request

    @staticmethod
    def _lock_pending(request_id) -> PurchaseRequest:
        request = PurchaseRequest.objects.select_for_update().filter(pk=request_id).first()
        if request is None:
            raise RequestNotFound(request_id)
        if not request.is_pending:
            logger.warning(
                "Purchase request already processed: request=%s status=%s",
                request_id,
                request.status,
            )
            raise AlreadyProcessed(request_id, request.status)
        return request

    @staticmethod
    @ledger_unit()
    def approve(request_id, note: str = "") -> PurchaseRequest:
        """
        Approve a pending request and credit its coins.

        Raises:
            RequestNotFound: If the request does not exist.
            AlreadyProcessed: If the request is no longer pending.
        """
        request = PurchaseService._lock_pending(request_id)

        WalletService.get_or_create_wallet(request.user_id)
        entry = WalletService.credit(
            request.user_id,
            request.coin_amount,
            kind=LedgerEntry.Kind.PURCHASE,
            description="Coin purchase approved",
            reference_id=request.id,
            metadata={
                "package_id": request.package_id,
                "paid_amount": str(request.paid_amount),
                "payment_reference": request.payment_reference,
                "payment_method": request.payment_method,
            },
        )

        request.status = PurchaseRequest.Status.APPROVED
        request.processed_at = timezone.now()
        request.admin_note = note
        request.credit_tx = entry
        request.save(update_fields=["status", "processed_at", "admin_note", "credit_tx"])

        logger.info(
            "Purchase approved: request=%s user=%s coins=%d new_balance=%d tx=%s",
            request.id,
            request.user_id,
            request.coin_amount,
            entry.balance_after,
            entry.transaction_id,
        )
        return request

    @staticmethod
    @ledger_unit()
    def reject(request_id, note: str = "") -> PurchaseRequest:
        """Reject a pending request. No balance changes."""
        request = PurchaseService._lock_pending(request_id)

        request.status = PurchaseRequest.Status.REJECTED
        request.processed_at = timezone.now()
        request.admin_note = note
        request.save(update_fields=["status", "processed_at", "admin_note"])

        logger.info("Purchase rejected: request=%s user=%s", request.id, request.user_id)
        return request

    @staticmethod
    def get_pending(limit: int = 50):
        return list(PurchaseRequest.get_pending().order_by("-requested_at")[:limit])

    @staticmethod
    def expire_stale(max_age_days: int = None) -> int:
        """Reject pending requests older than ``max_age_days``. Returns the count."""
        if max_age_days is None:
            max_age_days = getattr(settings, "PURCHASE_REQUEST_TTL_DAYS", 7)

        expired = 0
        stale_ids = list(
            PurchaseRequest.get_stale_pending(max_age_days).values_list("id", flat=True)
        )
        for request_id in stale_ids:
            try:
                PurchaseService.reject(
                    request_id, note=f"Expired after {max_age_days} days without verification"
                )
            except AlreadyProcessed:
                # Processed by an operator since the sweep started.
                continue
            except TransientError:
                logger.warning(
                    "Stale purchase request skipped (busy, retried next sweep): request=%s",
                    request_id,
                )
                continue
            expired += 1
        return expired
