from rest_framework.response import Response
from rest_framework.views import APIView

from economy.exceptions import LedgerError
from economy.services import AnalyticsService
from economy.views.params import int_query_param


class LeaderboardView(APIView):
    """
    GET /analytics/leaderboards/: Top gift senders and receivers.

    Served from the cache refreshed by the periodic leaderboard task;
    ``?refresh=1`` recomputes immediately.
    """

    def get(self, request, *args, **kwargs):
        limit = int_query_param(request, "limit", default=10, minimum=1, maximum=100)
        if request.query_params.get("refresh") in ("1", "true"):
            return Response(AnalyticsService.refresh_leaderboards(limit))
        return Response(AnalyticsService.get_leaderboards(limit))


class CommissionSummaryView(APIView):
    def get(self, request, *args, **kwargs):
        return Response(AnalyticsService.commission_summary())


class ContentRevenueView(APIView):
    """GET /analytics/contents/<content_id>/: Unlock revenue for one item."""

    def get(self, request, content_id, *args, **kwargs):
        try:
            revenue = AnalyticsService.content_revenue(content_id)
        except LedgerError as exc:
            return Response(exc.as_dict(), status=exc.status_code)
        return Response(revenue)


class PlatformStatsView(APIView):
    def get(self, request, *args, **kwargs):
        return Response(AnalyticsService.platform_stats())
