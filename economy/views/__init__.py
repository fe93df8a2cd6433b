from economy.views.wallet import AdminCreditView, LedgerListView, RetrieveWalletView
from economy.views.gift import (
    GiftCatalogView,
    GiftStatsView,
    GiftTransferDetailView,
    GiftView,
)
from economy.views.unlock import UnlockView
from economy.views.purchase import (
    ApprovePurchaseView,
    CreatePurchaseRequestView,
    PendingPurchaseListView,
    RejectPurchaseView,
)
from economy.views.analytics import (
    CommissionSummaryView,
    ContentRevenueView,
    LeaderboardView,
    PlatformStatsView,
)

__all__ = [
    "RetrieveWalletView",
    "LedgerListView",
    "AdminCreditView",
    "GiftView",
    "GiftStatsView",
    "GiftCatalogView",
    "GiftTransferDetailView",
    "UnlockView",
    "CreatePurchaseRequestView",
    "PendingPurchaseListView",
    "ApprovePurchaseView",
    "RejectPurchaseView",
    "LeaderboardView",
    "CommissionSummaryView",
    "ContentRevenueView",
    "PlatformStatsView",
]
