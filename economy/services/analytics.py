import logging
from datetime import timedelta

from django.conf import settings
from django.core.cache import cache
from django.db.models import Avg, Count, Max, Sum
from django.utils import timezone

from economy.exceptions import ContentNotFound
from economy.models import (
    CommissionRecord,
    Content,
    GiftTransfer,
    LedgerEntry,
    PurchaseRequest,
    Wallet,
)

logger = logging.getLogger(__name__)

LEADERBOARD_CACHE_KEY = "economy:gift-leaderboards"
LEADERBOARD_CACHED_ROWS = 100


def _truncate_leaderboards(leaderboards, limit):
    return {
        "top_senders": leaderboards["top_senders"][:limit],
        "top_receivers": leaderboards["top_receivers"][:limit],
        "refreshed_at": leaderboards["refreshed_at"],
    }


class AnalyticsService:
    """
    Read-only aggregations over gifts, commissions, unlocks and the ledger.

    Nothing here is authoritative for balances; every figure can be
    recomputed from the underlying rows at any time.
    """

    @staticmethod
    def _window_start(days):
        if days is None:
            days = getattr(settings, "LEADERBOARD_WINDOW_DAYS", 30)
        return timezone.now() - timedelta(days=days)

    @staticmethod
    def top_senders(limit: int = 10, days: int = None):
        rows = (
            GiftTransfer.objects.filter(created_at__gte=AnalyticsService._window_start(days))
            .values("sender_id")
            .annotate(
                user_name=Max("sender_name"),
                gifts_sent=Count("id"),
                total_spent=Sum("price"),
            )
            .order_by("-total_spent", "sender_id")[:limit]
        )
        return [
            {
                "user_id": row["sender_id"],
                "user_name": row["user_name"],
                "gifts_sent": row["gifts_sent"],
                "total_spent": row["total_spent"],
            }
            for row in rows
        ]

    @staticmethod
    def top_receivers(limit: int = 10, days: int = None):
        rows = (
            GiftTransfer.objects.filter(created_at__gte=AnalyticsService._window_start(days))
            .values("recipient_id")
            .annotate(
                user_name=Max("recipient_name"),
                gifts_received=Count("id"),
                total_earned=Sum("recipient_amount"),
            )
            .order_by("-total_earned", "recipient_id")[:limit]
        )
        return [
            {
                "user_id": row["recipient_id"],
                "user_name": row["user_name"],
                "gifts_received": row["gifts_received"],
                "total_earned": row["total_earned"],
            }
            for row in rows
        ]

    @staticmethod
    def refresh_leaderboards(limit: int = 10) -> dict:
        """
        Recompute both leaderboards and store them in the cache.

        The cache always holds LEADERBOARD_CACHED_ROWS rows per board so any
        later read up to that size can be served from it.
        """
        rows = max(limit, LEADERBOARD_CACHED_ROWS)
        leaderboards = {
            "top_senders": AnalyticsService.top_senders(rows),
            "top_receivers": AnalyticsService.top_receivers(rows),
            "refreshed_at": timezone.now().isoformat(),
        }
        cache.set(
            LEADERBOARD_CACHE_KEY,
            leaderboards,
            timeout=getattr(settings, "LEADERBOARD_CACHE_TIMEOUT", 600),
        )
        return _truncate_leaderboards(leaderboards, limit)

    @staticmethod
    def get_leaderboards(limit: int = 10) -> dict:
        leaderboards = cache.get(LEADERBOARD_CACHE_KEY)
        if leaderboards is None:
            return AnalyticsService.refresh_leaderboards(limit)
        return _truncate_leaderboards(leaderboards, limit)

    @staticmethod
    def commission_summary() -> dict:
        totals = CommissionRecord.objects.aggregate(
            total_commissions=Sum("commission_amount"),
            total_gifts_processed=Count("id"),
            total_original_amount=Sum("original_price"),
            average_commission=Avg("commission_amount"),
        )

        now = timezone.localtime()
        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
        start_of_week = start_of_day - timedelta(days=start_of_day.weekday())
        start_of_month = start_of_day.replace(day=1)

        def commission_since(start):
            result = CommissionRecord.objects.filter(created_at__gte=start).aggregate(
                total=Sum("commission_amount")
            )
            return result["total"] or 0

        return {
            "total_commissions": totals["total_commissions"] or 0,
            "total_gifts_processed": totals["total_gifts_processed"],
            "total_original_amount": totals["total_original_amount"] or 0,
            "average_commission": float(totals["average_commission"] or 0),
            "commission_today": commission_since(start_of_day),
            "commission_this_week": commission_since(start_of_week),
            "commission_this_month": commission_since(start_of_month),
        }

    @staticmethod
    def content_revenue(content_id: str) -> dict:
        content = Content.objects.filter(pk=content_id).first()
        if content is None:
            raise ContentNotFound(content_id)

        ledger_total = LedgerEntry.objects.filter(
            kind=LedgerEntry.Kind.UNLOCK, reference_id=content_id
        ).aggregate(total=Sum("amount"))["total"] or 0

        if content.view_count:
            conversion_rate = round(content.unlock_count / content.view_count * 100, 2)
        else:
            conversion_rate = 0.0

        return {
            "content_id": content.content_id,
            "title": content.title,
            "unlock_count": content.unlock_count,
            "unlock_cost": content.unlock_cost,
            "revenue": content.unlock_count * content.unlock_cost,
            "ledger_revenue": -ledger_total,
            "view_count": content.view_count,
            "conversion_rate": conversion_rate,
        }

    @staticmethod
    def platform_stats() -> dict:
        return {
            "total_coins_in_circulation": Wallet.objects.aggregate(total=Sum("balance"))[
                "total"
            ]
            or 0,
            "total_wallets": Wallet.objects.count(),
            "premium_contents": Content.objects.filter(is_premium=True, is_active=True).count(),
            "pending_purchases": PurchaseRequest.get_pending().count(),
            "total_revenue": PurchaseRequest.objects.filter(
                status=PurchaseRequest.Status.APPROVED
            ).aggregate(total=Sum("paid_amount"))["total"]
            or 0,
        }
