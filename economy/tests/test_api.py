import uuid

from django.core.cache import cache
from django.test import TestCase
from rest_framework.test import APIClient

from economy.catalog import GIFT_CATALOG
from economy.models import GiftTransfer, PurchaseRequest
from economy.services import GiftService, PurchaseService
from economy.tests.helpers import balance_of, make_content, make_user

# ============================================================
# Wallet API Tests
# ============================================================


class WalletAPITest(TestCase):
    def setUp(self):
        self.client = APIClient()
        make_user("alice", name="Alice", balance=300)

    def test_retrieve_wallet(self):
        response = self.client.get("/wallets/alice/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["wallet_id"], "alice")
        self.assertEqual(response.data["balance"], 300)

    def test_retrieve_wallet_creates_missing_wallet(self):
        make_user("bob")
        response = self.client.get("/wallets/bob/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["balance"], 0)

    def test_retrieve_unknown_user(self):
        response = self.client.get("/wallets/ghost/")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["code"], "user_not_found")

    def test_list_transactions(self):
        make_user("bob")
        GiftService.send_catalog_gift("alice", "bob", "heart")

        response = self.client.get("/wallets/alice/transactions/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 2)

    def test_filter_transactions_by_kind(self):
        make_user("bob")
        GiftService.send_catalog_gift("alice", "bob", "heart")

        response = self.client.get("/wallets/alice/transactions/?kind=gift_sent")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["amount"], -10)

    def test_unknown_kind_rejected(self):
        response = self.client.get("/wallets/alice/transactions/?kind=refund")
        self.assertEqual(response.status_code, 400)

    def test_bad_limit_rejected(self):
        response = self.client.get("/wallets/alice/transactions/?limit=abc")
        self.assertEqual(response.status_code, 400)
        response = self.client.get("/wallets/alice/transactions/?limit=1000")
        self.assertEqual(response.status_code, 400)

    def test_admin_credit(self):
        response = self.client.post(
            "/wallets/alice/admin-credit",
            {"amount": 500, "admin_note": "Goodwill"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["balance"], 800)
        self.assertEqual(response.data["transaction"]["kind"], "admin_credit")

    def test_admin_credit_invalid_amounts(self):
        for amount in (0, -10, 10001):
            response = self.client.post(
                "/wallets/alice/admin-credit", {"amount": amount}, format="json"
            )
            self.assertEqual(response.status_code, 400)
        self.assertEqual(balance_of("alice"), 300)

    def test_admin_credit_unknown_user(self):
        response = self.client.post(
            "/wallets/ghost/admin-credit", {"amount": 10}, format="json"
        )
        self.assertEqual(response.status_code, 404)


# ============================================================
# Gift API Tests
# ============================================================


class GiftAPITest(TestCase):
    def setUp(self):
        self.client = APIClient()
        make_user("alice", name="Alice", balance=500)
        make_user("bob", name="Bob", balance=0)

    def test_send_gift(self):
        response = self.client.post(
            "/wallets/alice/gifts/",
            {"recipient_id": "bob", "gift_id": "trophy", "message": "Great stream"},
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["sender_balance"], 400)
        self.assertEqual(response.data["recipient_balance"], 70)
        self.assertEqual(response.data["platform_commission"], 30)
        self.assertEqual(response.data["gift_transfer"]["type"], "sent")
        self.assertEqual(response.data["gift_transfer"]["message"], "Great stream")

    def test_send_gift_insufficient_funds(self):
        response = self.client.post(
            "/wallets/alice/gifts/",
            {"recipient_id": "bob", "gift_id": "universe"},
            format="json",
        )
        self.assertEqual(response.status_code, 402)
        self.assertEqual(response.data["code"], "insufficient_funds")
        self.assertEqual(response.data["balance"], 500)
        self.assertEqual(response.data["required"], 50000)

    def test_send_gift_to_self(self):
        response = self.client.post(
            "/wallets/alice/gifts/",
            {"recipient_id": "alice", "gift_id": "heart"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["code"], "self_transfer_denied")

    def test_send_unknown_gift(self):
        response = self.client.post(
            "/wallets/alice/gifts/",
            {"recipient_id": "bob", "gift_id": "spaceship-9000"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(GiftTransfer.objects.count(), 0)

    def test_send_gift_unknown_recipient(self):
        response = self.client.post(
            "/wallets/alice/gifts/",
            {"recipient_id": "ghost", "gift_id": "heart"},
            format="json",
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["code"], "recipient_not_found")

    def test_gift_history(self):
        GiftService.send_catalog_gift("alice", "bob", "heart")

        response = self.client.get("/wallets/bob/gifts/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["type"], "received")

    def test_gift_stats(self):
        GiftService.send_catalog_gift("alice", "bob", "heart")

        response = self.client.get("/wallets/alice/gifts/stats/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["gifts_sent"], 1)
        self.assertEqual(response.data["most_sent_gift"], "Heart")

    def test_gift_catalog(self):
        response = self.client.get("/gifts/catalog/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["total"], len(GIFT_CATALOG))
        self.assertEqual(response.data["commission_rate"], 30)

        trophy = next(g for g in response.data["gifts"] if g["id"] == "trophy")
        self.assertEqual(trophy["recipient_amount"], 70)
        self.assertEqual(trophy["platform_commission"], 30)

    def test_gift_detail(self):
        transfer = GiftService.send_catalog_gift("alice", "bob", "heart").gift_transfer

        response = self.client.get(f"/gifts/{transfer.id}/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["id"], str(transfer.id))

        response = self.client.get(f"/gifts/{uuid.uuid4()}/")
        self.assertEqual(response.status_code, 404)


# ============================================================
# Unlock API Tests
# ============================================================


class UnlockAPITest(TestCase):
    def setUp(self):
        self.client = APIClient()
        make_user("alice", balance=200)
        make_content("drama-1")

    def test_unlock_then_repeat(self):
        response = self.client.post(
            "/wallets/alice/unlocks/", {"content_id": "drama-1"}, format="json"
        )
        self.assertEqual(response.status_code, 201)
        self.assertTrue(response.data["unlocked"])
        self.assertEqual(response.data["balance"], 101)
        self.assertEqual(response.data["cost"], 99)

        response = self.client.post(
            "/wallets/alice/unlocks/", {"content_id": "drama-1"}, format="json"
        )
        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.data["unlocked"])
        self.assertTrue(response.data["already_unlocked"])
        self.assertEqual(response.data["balance"], 101)

    def test_list_unlocked(self):
        self.client.post("/wallets/alice/unlocks/", {"content_id": "drama-1"}, format="json")

        response = self.client.get("/wallets/alice/unlocks/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["content_ids"], ["drama-1"])

    def test_unlock_insufficient_funds(self):
        make_user("bob", balance=50)

        response = self.client.post(
            "/wallets/bob/unlocks/", {"content_id": "drama-1"}, format="json"
        )
        self.assertEqual(response.status_code, 402)
        self.assertEqual(response.data["balance"], 50)

    def test_unlock_free_content(self):
        make_content("free-1", is_premium=False)

        response = self.client.post(
            "/wallets/alice/unlocks/", {"content_id": "free-1"}, format="json"
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["code"], "content_not_premium")

    def test_unlock_missing_content(self):
        response = self.client.post(
            "/wallets/alice/unlocks/", {"content_id": "nope"}, format="json"
        )
        self.assertEqual(response.status_code, 404)

    def test_unlock_missing_content_id(self):
        response = self.client.post("/wallets/alice/unlocks/", {}, format="json")
        self.assertEqual(response.status_code, 400)


# ============================================================
# Purchase API Tests
# ============================================================


class PurchaseAPITest(TestCase):
    def setUp(self):
        self.client = APIClient()
        make_user("alice")

    def _create(self, **data):
        payload = {"package_id": "coins_99", "payment_reference": "bank-42"}
        payload.update(data)
        return self.client.post("/wallets/alice/purchases/", payload, format="json")

    def test_create_request(self):
        response = self._create()
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["status"], "pending_admin_verification")
        self.assertEqual(response.data["coin_amount"], 99)

    def test_create_request_custom_amount(self):
        response = self._create(package_id="", coin_amount=300, paid_amount="3.00")
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["coin_amount"], 300)

    def test_create_request_validation(self):
        self.assertEqual(self._create(package_id="coins_7").status_code, 400)
        self.assertEqual(self._create(package_id="").status_code, 400)
        response = self.client.post(
            "/wallets/alice/purchases/", {"package_id": "coins_99"}, format="json"
        )
        self.assertEqual(response.status_code, 400)

    def test_pending_list(self):
        self._create()
        self._create(package_id="coins_495")

        response = self.client.get("/purchases/pending/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 2)

    def test_approve(self):
        request_id = self._create().data["id"]

        response = self.client.post(
            f"/purchases/{request_id}/approve", {"admin_note": "ok"}, format="json"
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["balance"], 99)
        self.assertEqual(response.data["request"]["status"], "approved")

        response = self.client.post(f"/purchases/{request_id}/approve", {}, format="json")
        self.assertEqual(response.status_code, 409)
        self.assertEqual(balance_of("alice"), 99)

    def test_reject(self):
        request_id = self._create().data["id"]

        response = self.client.post(f"/purchases/{request_id}/reject", {}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], "rejected")

    def test_unknown_request(self):
        response = self.client.post(f"/purchases/{uuid.uuid4()}/approve", {}, format="json")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["code"], "request_not_found")


# ============================================================
# Analytics API Tests
# ============================================================


class AnalyticsAPITest(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()
        make_user("alice", balance=500)
        make_user("bob")
        GiftService.send_catalog_gift("alice", "bob", "trophy")

    def test_leaderboards(self):
        response = self.client.get("/analytics/leaderboards/?refresh=1")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["top_senders"][0]["user_id"], "alice")
        self.assertEqual(response.data["top_receivers"][0]["user_id"], "bob")

    def test_commissions(self):
        response = self.client.get("/analytics/commissions/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["total_commissions"], 30)

    def test_content_revenue(self):
        make_content("drama-1")

        response = self.client.get("/analytics/contents/drama-1/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["unlock_count"], 0)

        response = self.client.get("/analytics/contents/missing/")
        self.assertEqual(response.status_code, 404)

    def test_platform(self):
        PurchaseService.create_request("alice", package_id="coins_99")

        response = self.client.get("/analytics/platform/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["pending_purchases"], 1)
        self.assertEqual(
            response.data["pending_purchases"], PurchaseRequest.get_pending().count()
        )
