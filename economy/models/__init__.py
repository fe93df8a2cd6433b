from economy.models.timestamped import TimestampedModel
from economy.models.profile import UserProfile
from economy.models.wallet import Wallet
from economy.models.ledger import LedgerEntry
from economy.models.gift import CommissionRecord, GiftTransfer
from economy.models.purchase import PurchaseRequest
from economy.models.content import Content, UnlockEntitlement

__all__ = [
    "TimestampedModel",
    "UserProfile",
    "Wallet",
    "LedgerEntry",
    "GiftTransfer",
    "CommissionRecord",
    "PurchaseRequest",
    "Content",
    "UnlockEntitlement",
]
