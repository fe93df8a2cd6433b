from economy.services.wallet import WalletService
from economy.services.gift import GiftResult, GiftService
from economy.services.unlock import UnlockResult, UnlockService
from economy.services.purchase import PurchaseService
from economy.services.analytics import AnalyticsService

__all__ = [
    "WalletService",
    "GiftService",
    "GiftResult",
    "UnlockService",
    "UnlockResult",
    "PurchaseService",
    "AnalyticsService",
]
