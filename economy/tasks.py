import logging

from celery import shared_task
from django.db.models import F

from economy.models import Content
from economy.services import AnalyticsService, PurchaseService, WalletService

logger = logging.getLogger(__name__)


@shared_task(ignore_result=True)
def increment_content_views(content_id: str):
    """
    Fire-and-forget view counter bump.

    Runs outside any ledger unit; a lost increment only skews conversion
    rates, never balances.
    """
    updated = Content.objects.filter(pk=content_id).update(view_count=F("view_count") + 1)
    if not updated:
        logger.warning("View count not updated, content %s not found.", content_id)
    return updated


@shared_task
def refresh_gift_leaderboards():
    """
    Periodic task: recompute top gift senders/receivers into the cache.

    Runs via Celery Beat on a configurable interval.
    """
    leaderboards = AnalyticsService.refresh_leaderboards()
    logger.info(
        "Gift leaderboards refreshed: senders=%d receivers=%d",
        len(leaderboards["top_senders"]),
        len(leaderboards["top_receivers"]),
    )
    return {
        "top_senders": len(leaderboards["top_senders"]),
        "top_receivers": len(leaderboards["top_receivers"]),
    }


@shared_task
def expire_stale_purchase_requests():
    """Periodic task: reject purchase requests left pending past their TTL."""
    expired = PurchaseService.expire_stale()
    if expired:
        logger.info("Expired %d stale purchase request(s).", expired)
    return {"expired": expired}


@shared_task
def reconcile_wallet_balances():
    """
    Periodic task: compare every wallet balance with the sum of its ledger.

    Mismatches are logged for investigation; nothing is corrected here.
    """
    reports = WalletService.reconcile_all()
    mismatched = []
    for report in reports:
        if not report["consistent"]:
            logger.error(
                "Ledger mismatch: wallet=%s balance=%d ledger_total=%d",
                report["wallet_id"],
                report["balance"],
                report["ledger_total"],
            )
            mismatched.append(report["wallet_id"])

    return {"checked": len(reports), "mismatched": mismatched}
