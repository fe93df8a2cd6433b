import logging
from dataclasses import dataclass

from django.db import IntegrityError, transaction
from django.db.models import F

from economy.exceptions import AlreadyUnlocked, ContentNotFound, ContentNotPremium
from economy.models import Content, LedgerEntry, UnlockEntitlement
from economy.services.wallet import WalletService
from economy.utils import ledger_unit

logger = logging.getLogger(__name__)


@dataclass
class UnlockResult:
    unlocked: bool
    balance: int
    entitlement: UnlockEntitlement = None


class UnlockService:
    """
    Grants permanent access to premium content for a one-time coin debit.

    The debit, the entitlement row and the content's unlock counter change
    in one unit of work while the user's wallet row is locked, so a second
    unlock for the same (user, content) either sees the entitlement and
    short-circuits, or trips the unique constraint and rolls everything
    back. The unlock counter is therefore incremented exactly once per paid
    entitlement.
    """

    @staticmethod
    def unlock_content(user_id: str, content_id: str) -> UnlockResult:
        """
        Unlock a content item for a user.

        Returns:
            UnlockResult with unlocked=True and the new balance.

        Raises:
            AlreadyUnlocked: If the user already owns the content. Carries the
                unchanged balance; nothing was debited.
            ContentNotFound: If the content is missing or inactive.
            ContentNotPremium: If the content is free.
            InsufficientFunds: If the balance is below the unlock cost.
            UserNotFound: If no profile exists for the user.
        """
        WalletService.get_or_create_wallet(user_id)

        with ledger_unit():
            wallet = WalletService.lock_wallet(user_id)

            if UnlockEntitlement.objects.filter(
                user_id=user_id, content_id=content_id
            ).exists():
                logger.info(
                    "Unlock skipped (already unlocked): user=%s content=%s balance=%d",
                    user_id,
                    content_id,
                    wallet.balance,
                )
                raise AlreadyUnlocked(content_id, balance=wallet.balance)

            content = (
                Content.objects.select_for_update()
                .filter(pk=content_id, is_active=True)
                .first()
            )
            if content is None:
                raise ContentNotFound(content_id)
            if not content.is_premium:
                raise ContentNotPremium(content_id)

            cost = content.unlock_cost
            entry = WalletService.debit(
                user_id,
                cost,
                kind=LedgerEntry.Kind.UNLOCK,
                description=f"Unlocked: {content.title}",
                reference_id=content_id,
                metadata={
                    "content_id": content_id,
                    "content_title": content.title,
                    "content_class": content.content_class,
                },
            )

            try:
                with transaction.atomic():
                    entitlement = UnlockEntitlement.objects.create(
                        user_id=user_id,
                        content=content,
                        cost=cost,
                        ledger_entry=entry,
                    )
            except IntegrityError:
                raise AlreadyUnlocked(content_id, balance=wallet.balance)

            Content.objects.filter(pk=content_id).update(unlock_count=F("unlock_count") + 1)

        logger.info(
            "Content unlocked: user=%s content=%s cost=%d new_balance=%d tx=%s",
            user_id,
            content_id,
            cost,
            entry.balance_after,
            entry.transaction_id,
        )
        return UnlockResult(unlocked=True, balance=entry.balance_after, entitlement=entitlement)

    @staticmethod
    def has_unlocked(user_id: str, content_id: str) -> bool:
        return UnlockEntitlement.objects.filter(
            user_id=user_id, content_id=content_id
        ).exists()

    @staticmethod
    def unlocked_content_ids(user_id: str):
        return list(
            UnlockEntitlement.objects.filter(user_id=user_id).values_list(
                "content_id", flat=True
            )
        )

    @staticmethod
    def record_view(content_id: str) -> None:
        """Queue a best-effort view count bump. Never raises."""
        from economy.tasks import increment_content_views

        try:
            increment_content_views.delay(content_id)
        except Exception:
            logger.exception("Could not queue view count update: content=%s", content_id)
