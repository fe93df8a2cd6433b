import logging
import uuid
from dataclasses import dataclass

from django.db import DatabaseError, transaction
from django.db.models import Count, F, Q

from economy.catalog import Gift, get_gift
from economy.exceptions import (
    RecipientNotFound,
    SelfTransferDenied,
    SenderNotFound,
    TransferNotFound,
    UserNotFound,
)
from economy.models import CommissionRecord, GiftTransfer, LedgerEntry, UserProfile
from economy.services.wallet import WalletService
from economy.utils import calculate_commission, get_commission_percent, ledger_unit

logger = logging.getLogger(__name__)


@dataclass
class GiftResult:
    gift_transfer: GiftTransfer
    sender_balance: int
    recipient_balance: int

    @property
    def commission(self):
        return self.gift_transfer.commission


class GiftService:
    """
    Sends virtual gifts as one atomic three-way split.

    The sender is debited the full price, the recipient credited the price
    minus the platform commission, and the transfer plus its commission
    record are written in the same unit. A failure at any step rolls back
    the debit too. Profile gift counters are statistics and are updated in
    a savepoint whose failure is logged without touching the transfer.
    """

    @staticmethod
    def send_catalog_gift(
        sender_id: str,
        recipient_id: str,
        gift_id: str,
        message: str = None,
        context: str = None,
    ) -> GiftResult:
        return GiftService.send_gift(
            sender_id, recipient_id, get_gift(gift_id), message=message, context=context
        )

    @staticmethod
    def send_gift(
        sender_id: str,
        recipient_id: str,
        gift: Gift,
        message: str = None,
        context: str = None,
    ) -> GiftResult:
        """
        Send a gift from sender to recipient.

        Raises:
            SelfTransferDenied: If sender and recipient are the same user.
            SenderNotFound / RecipientNotFound: If a profile is missing or inactive.
            InsufficientFunds: If the sender cannot pay the gift price.
        """
        if sender_id == recipient_id:
            raise SelfTransferDenied()

        rate = get_commission_percent()
        recipient_amount, commission = calculate_commission(gift.price, rate)

        with ledger_unit():
            sender = UserProfile.objects.filter(pk=sender_id, is_active=True).first()
            if sender is None:
                raise SenderNotFound(sender_id)
            recipient = UserProfile.objects.filter(pk=recipient_id, is_active=True).first()
            if recipient is None:
                raise RecipientNotFound(recipient_id)

            WalletService.get_or_create_wallet(sender_id)
            WalletService.get_or_create_wallet(recipient_id)
            WalletService.lock_wallets(sender_id, recipient_id)

            transfer_id = uuid.uuid4()
            sender_tx = WalletService.debit(
                sender_id,
                gift.price,
                kind=LedgerEntry.Kind.GIFT_SENT,
                description=f"Sent {gift.name} to {recipient.name or recipient_id}",
                reference_id=transfer_id,
                metadata={
                    "gift_id": gift.gift_id,
                    "gift_name": gift.name,
                    "gift_emoji": gift.emoji,
                    "recipient_id": recipient_id,
                    "recipient_name": recipient.name,
                },
            )
            recipient_tx = WalletService.credit(
                recipient_id,
                recipient_amount,
                kind=LedgerEntry.Kind.GIFT_RECEIVED,
                description=f"Received {gift.name} from {sender.name or sender_id}",
                reference_id=transfer_id,
                metadata={
                    "gift_id": gift.gift_id,
                    "gift_name": gift.name,
                    "gift_emoji": gift.emoji,
                    "sender_id": sender_id,
                    "sender_name": sender.name,
                    "commission": commission,
                },
            )

            transfer = GiftTransfer.objects.create(
                id=transfer_id,
                sender_id=sender_id,
                sender_name=sender.name,
                recipient_id=recipient_id,
                recipient_name=recipient.name,
                gift_id=gift.gift_id,
                gift_name=gift.name,
                gift_emoji=gift.emoji,
                gift_rarity=gift.rarity,
                price=gift.price,
                recipient_amount=recipient_amount,
                commission=commission,
                commission_rate=rate,
                sender_tx=sender_tx,
                recipient_tx=recipient_tx,
                message=message,
                context=context,
            )
            CommissionRecord.objects.create(
                gift_transfer=transfer,
                commission_amount=commission,
                original_price=gift.price,
                rate=rate,
                sender_id=sender_id,
                recipient_id=recipient_id,
                gift_name=gift.name,
            )

            try:
                with transaction.atomic():
                    GiftService._record_gift_stats(
                        sender_id, recipient_id, gift.price, recipient_amount
                    )
            except DatabaseError:
                logger.exception(
                    "Gift statistics update failed (ignored): transfer=%s", transfer_id
                )

        logger.info(
            "Gift sent: transfer=%s sender=%s recipient=%s gift=%s price=%d "
            "recipient_amount=%d commission=%d",
            transfer.id,
            sender_id,
            recipient_id,
            gift.gift_id,
            gift.price,
            recipient_amount,
            commission,
        )
        return GiftResult(
            gift_transfer=transfer,
            sender_balance=sender_tx.balance_after,
            recipient_balance=recipient_tx.balance_after,
        )

    @staticmethod
    def _record_gift_stats(sender_id, recipient_id, price, recipient_amount):
        UserProfile.objects.filter(pk=sender_id).update(
            gifts_sent_count=F("gifts_sent_count") + 1,
            total_coins_spent_on_gifts=F("total_coins_spent_on_gifts") + price,
        )
        UserProfile.objects.filter(pk=recipient_id).update(
            gifts_received_count=F("gifts_received_count") + 1,
            total_coins_earned_from_gifts=F("total_coins_earned_from_gifts")
            + recipient_amount,
        )

    @staticmethod
    def get_transfer(transfer_id) -> GiftTransfer:
        transfer = GiftTransfer.objects.filter(pk=transfer_id).first()
        if transfer is None:
            raise TransferNotFound(transfer_id)
        return transfer

    @staticmethod
    def get_history(user_id: str, limit: int = 50, offset: int = 0):
        """Return gifts the user sent or received, newest first."""
        queryset = GiftTransfer.objects.filter(
            Q(sender_id=user_id) | Q(recipient_id=user_id)
        ).order_by("-created_at")
        return list(queryset[offset : offset + limit])

    @staticmethod
    def get_stats(user_id: str) -> dict:
        """Per-user gift statistics from the profile counters and transfer history."""
        profile = UserProfile.objects.filter(pk=user_id).first()
        if profile is None:
            raise UserNotFound(user_id)

        sent = GiftTransfer.objects.filter(sender_id=user_id)
        received = GiftTransfer.objects.filter(recipient_id=user_id)
        last_sent = sent.order_by("-created_at").values_list("created_at", flat=True).first()
        last_received = (
            received.order_by("-created_at").values_list("created_at", flat=True).first()
        )

        return {
            "user_id": profile.uid,
            "user_name": profile.name,
            "gifts_sent": profile.gifts_sent_count,
            "gifts_received": profile.gifts_received_count,
            "total_coins_spent_on_gifts": profile.total_coins_spent_on_gifts,
            "total_coins_earned_from_gifts": profile.total_coins_earned_from_gifts,
            "most_sent_gift": _most_frequent_gift(sent),
            "most_received_gift": _most_frequent_gift(received),
            "last_gift_sent_at": last_sent,
            "last_gift_received_at": last_received,
        }


def _most_frequent_gift(queryset):
    row = (
        queryset.values("gift_name")
        .annotate(times=Count("id"))
        .order_by("-times", "gift_name")
        .first()
    )
    return row["gift_name"] if row else None
