from economy.serializers.wallet import (
    AdminCreditSerializer,
    LedgerEntrySerializer,
    WalletSerializer,
)
from economy.serializers.gift import GiftTransferSerializer, SendGiftSerializer
from economy.serializers.unlock import UnlockContentSerializer
from economy.serializers.purchase import (
    CreatePurchaseRequestSerializer,
    PurchaseDecisionSerializer,
    PurchaseRequestSerializer,
)

__all__ = [
    "WalletSerializer",
    "LedgerEntrySerializer",
    "AdminCreditSerializer",
    "SendGiftSerializer",
    "GiftTransferSerializer",
    "UnlockContentSerializer",
    "CreatePurchaseRequestSerializer",
    "PurchaseDecisionSerializer",
    "PurchaseRequestSerializer",
]
