from django.urls import path

from economy.views import (
    AdminCreditView,
    ApprovePurchaseView,
    CommissionSummaryView,
    ContentRevenueView,
    CreatePurchaseRequestView,
    GiftCatalogView,
    GiftStatsView,
    GiftTransferDetailView,
    GiftView,
    LeaderboardView,
    LedgerListView,
    PendingPurchaseListView,
    PlatformStatsView,
    RejectPurchaseView,
    RetrieveWalletView,
    UnlockView,
)

urlpatterns = [
    path("wallets/<str:user_id>/", RetrieveWalletView.as_view(), name="wallet-detail"),
    path(
        "wallets/<str:user_id>/transactions/",
        LedgerListView.as_view(),
        name="wallet-transactions",
    ),
    path("wallets/<str:user_id>/gifts/", GiftView.as_view(), name="wallet-gifts"),
    path(
        "wallets/<str:user_id>/gifts/stats/",
        GiftStatsView.as_view(),
        name="wallet-gift-stats",
    ),
    path("wallets/<str:user_id>/unlocks/", UnlockView.as_view(), name="wallet-unlocks"),
    path(
        "wallets/<str:user_id>/purchases/",
        CreatePurchaseRequestView.as_view(),
        name="wallet-purchases",
    ),
    path(
        "wallets/<str:user_id>/admin-credit",
        AdminCreditView.as_view(),
        name="wallet-admin-credit",
    ),
    path("purchases/pending/", PendingPurchaseListView.as_view(), name="purchase-pending"),
    path(
        "purchases/<uuid:request_id>/approve",
        ApprovePurchaseView.as_view(),
        name="purchase-approve",
    ),
    path(
        "purchases/<uuid:request_id>/reject",
        RejectPurchaseView.as_view(),
        name="purchase-reject",
    ),
    path("gifts/catalog/", GiftCatalogView.as_view(), name="gift-catalog"),
    path("gifts/<uuid:transfer_id>/", GiftTransferDetailView.as_view(), name="gift-detail"),
    path("analytics/leaderboards/", LeaderboardView.as_view(), name="analytics-leaderboards"),
    path(
        "analytics/commissions/",
        CommissionSummaryView.as_view(),
        name="analytics-commissions",
    ),
    path(
        "analytics/contents/<str:content_id>/",
        ContentRevenueView.as_view(),
        name="analytics-content",
    ),
    path("analytics/platform/", PlatformStatsView.as_view(), name="analytics-platform"),
]
