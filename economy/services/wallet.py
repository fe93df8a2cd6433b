import logging

from django.conf import settings
from django.db.models import BigIntegerField, F, Sum, Value
from django.db.models.functions import Coalesce
from django.utils import timezone

from economy.exceptions import (
    InvalidAmount,
    InsufficientFunds,
    UserNotFound,
    WalletNotFound,
)
from economy.models import LedgerEntry, UserProfile, Wallet
from economy.utils import ledger_unit

logger = logging.getLogger(__name__)


def _validate_amount(amount):
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidAmount(amount)


class WalletService:
    """
    Owns wallet creation and the raw credit/debit primitives.

    Every mutation locks the wallet row with select_for_update() and changes
    the balance through an F() expression. Debits are conditional updates
    (balance >= amount) so concurrently committed debits can never drive a
    balance below zero. Each mutation writes exactly one ledger entry in the
    same unit of work as the balance change.
    """

    @staticmethod
    def get_or_create_wallet(user_id: str) -> Wallet:
        """
        Return the user's wallet, creating it with a zero balance if needed.

        Raises:
            UserNotFound: If no profile exists for the user.
        """
        wallet = Wallet.objects.filter(pk=user_id).first()
        if wallet is not None:
            return wallet

        profile = UserProfile.objects.filter(pk=user_id).first()
        if profile is None:
            raise UserNotFound(user_id)

        wallet, created = Wallet.objects.get_or_create(
            wallet_id=user_id,
            defaults={
                "user": profile,
                "user_name": profile.name,
                "user_phone_number": profile.phone_number,
            },
        )
        if created:
            logger.info("Wallet created: wallet=%s", user_id)
        return wallet

    @staticmethod
    def get_wallet(user_id: str) -> Wallet:
        wallet = Wallet.objects.filter(pk=user_id).first()
        if wallet is None:
            raise WalletNotFound(user_id)
        return wallet

    @staticmethod
    def lock_wallet(user_id: str) -> Wallet:
        """Lock and return the wallet row. Must run inside a ledger unit."""
        wallet = Wallet.objects.select_for_update().filter(pk=user_id).first()
        if wallet is None:
            raise WalletNotFound(user_id)
        return wallet

    @staticmethod
    def lock_wallets(*user_ids) -> dict:
        """Lock several wallet rows in primary-key order to avoid deadlocks."""
        wallets = (
            Wallet.objects.select_for_update()
            .filter(pk__in=sorted(set(user_ids)))
            .order_by("pk")
        )
        return {wallet.pk: wallet for wallet in wallets}

    @staticmethod
    @ledger_unit()
    def credit(
        user_id: str,
        amount: int,
        kind: str = LedgerEntry.Kind.CREDIT,
        description: str = "",
        reference_id: str = None,
        metadata: dict = None,
    ) -> LedgerEntry:
        """
        Add coins to an existing wallet.

        Returns:
            The ledger entry written; its balance_after is the new balance.

        Raises:
            InvalidAmount: If amount is not a positive integer.
            WalletNotFound: If the user has no wallet.
        """
        _validate_amount(amount)
        wallet = WalletService.lock_wallet(user_id)

        Wallet.objects.filter(pk=wallet.pk).update(
            balance=F("balance") + amount, updated_at=timezone.now()
        )

        entry = WalletService._record_entry(
            wallet, amount, kind, description, reference_id, metadata
        )
        logger.info(
            "Credit completed: wallet=%s kind=%s amount=%d new_balance=%d tx=%s",
            wallet.pk,
            kind,
            amount,
            entry.balance_after,
            entry.transaction_id,
        )
        return entry

    @staticmethod
    @ledger_unit()
    def debit(
        user_id: str,
        amount: int,
        kind: str = LedgerEntry.Kind.DEBIT,
        description: str = "",
        reference_id: str = None,
        metadata: dict = None,
    ) -> LedgerEntry:
        """
        Remove coins from a wallet if, and only if, the balance covers them.

        The balance check and the write are a single conditional UPDATE, so
        a debit racing another debit on the same wallet sees the committed
        balance, not a stale read.

        Returns:
            The ledger entry written; its balance_after is the new balance.

        Raises:
            InvalidAmount: If amount is not a positive integer.
            WalletNotFound: If the user has no wallet.
            InsufficientFunds: If the balance is lower than amount.
        """
        _validate_amount(amount)
        wallet = WalletService.lock_wallet(user_id)

        updated = Wallet.objects.filter(pk=wallet.pk, balance__gte=amount).update(
            balance=F("balance") - amount, updated_at=timezone.now()
        )
        if not updated:
            current = (
                Wallet.objects.filter(pk=wallet.pk)
                .values_list("balance", flat=True)
                .get()
            )
            logger.warning(
                "Debit rejected (insufficient funds): wallet=%s kind=%s "
                "balance=%d amount=%d",
                wallet.pk,
                kind,
                current,
                amount,
            )
            raise InsufficientFunds(current=current, required=amount)

        entry = WalletService._record_entry(
            wallet, -amount, kind, description, reference_id, metadata
        )
        logger.info(
            "Debit completed: wallet=%s kind=%s amount=%d new_balance=%d tx=%s",
            wallet.pk,
            kind,
            amount,
            entry.balance_after,
            entry.transaction_id,
        )
        return entry

    @staticmethod
    def _record_entry(wallet, signed_amount, kind, description, reference_id, metadata):
        # The row lock is held, so the refreshed balance is exactly the result
        # of this unit's update.
        wallet.refresh_from_db(fields=["balance", "updated_at"])
        return LedgerEntry.objects.create(
            wallet=wallet,
            user_id=wallet.user_id,
            user_name=wallet.user_name,
            kind=kind,
            amount=signed_amount,
            balance_before=wallet.balance - signed_amount,
            balance_after=wallet.balance,
            description=description,
            reference_id=str(reference_id) if reference_id is not None else None,
            metadata=metadata or {},
        )

    @staticmethod
    @ledger_unit()
    def admin_credit(
        user_id: str, amount: int, description: str = "", admin_note: str = ""
    ) -> LedgerEntry:
        """
        Credit coins on an operator's authority, creating the wallet if needed.

        Raises:
            InvalidAmount: If amount is not within 1..ADMIN_CREDIT_MAX.
            UserNotFound: If no profile exists for the user.
        """
        _validate_amount(amount)
        max_amount = getattr(settings, "ADMIN_CREDIT_MAX", 10000)
        if amount > max_amount:
            raise InvalidAmount(amount)

        WalletService.get_or_create_wallet(user_id)
        return WalletService.credit(
            user_id,
            amount,
            kind=LedgerEntry.Kind.ADMIN_CREDIT,
            description=description or "Admin added coins",
            metadata={"admin_note": admin_note} if admin_note else None,
        )

    @staticmethod
    def get_ledger(user_id: str, limit: int = 50, kind: str = None):
        """Return the newest ledger entries for a user's wallet."""
        queryset = LedgerEntry.objects.filter(wallet_id=user_id)
        if kind:
            queryset = queryset.filter(kind=kind)
        return list(queryset.order_by("-created_at")[:limit])

    @staticmethod
    def reconcile(user_id: str) -> dict:
        """Compare a wallet's balance with the sum of its ledger amounts."""
        reports = _reconciliation_reports(Wallet.objects.filter(pk=user_id))
        if not reports:
            raise WalletNotFound(user_id)
        return reports[0]

    @staticmethod
    def reconcile_all() -> list:
        """Reconciliation report for every wallet, in wallet id order."""
        return _reconciliation_reports(Wallet.objects.all())


def _reconciliation_reports(queryset):
    # Balance and ledger total are read by a single statement so a debit
    # committing mid-audit is either fully visible or not at all.
    rows = (
        queryset.annotate(
            ledger_total=Coalesce(
                Sum("entries__amount"), Value(0), output_field=BigIntegerField()
            )
        )
        .order_by("pk")
        .values_list("wallet_id", "balance", "ledger_total")
    )
    return [
        {
            "wallet_id": wallet_id,
            "balance": balance,
            "ledger_total": ledger_total,
            "consistent": balance == ledger_total,
        }
        for wallet_id, balance, ledger_total in rows
    ]
