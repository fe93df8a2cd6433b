from datetime import timedelta

from django.db import IntegrityError, transaction
from django.test import TestCase, override_settings
from django.utils import timezone

from economy.catalog import GIFT_CATALOG, get_coin_package, get_gift, is_valid_gift_price
from economy.exceptions import (
    InvalidAmount,
    InvalidGift,
    InvalidPackage,
    LedgerEntryImmutable,
)
from economy.models import Content, LedgerEntry, PurchaseRequest, Wallet
from economy.services import WalletService
from economy.tests.helpers import make_user
from economy.utils import calculate_commission, get_commission_percent

# ============================================================
# Commission Tests
# ============================================================


class CommissionTest(TestCase):
    def test_thirty_percent_of_hundred(self):
        self.assertEqual(calculate_commission(100, 30), (70, 30))

    def test_commission_rounds_down(self):
        # 45 * 30% = 13.5
        self.assertEqual(calculate_commission(45, 30), (32, 13))
        self.assertEqual(calculate_commission(10, 30), (7, 3))

    def test_single_coin_goes_to_recipient(self):
        self.assertEqual(calculate_commission(1, 30), (1, 0))

    def test_zero_rate(self):
        self.assertEqual(calculate_commission(250, 0), (250, 0))

    def test_non_positive_price_raises(self):
        with self.assertRaises(InvalidAmount):
            calculate_commission(0, 30)
        with self.assertRaises(InvalidAmount):
            calculate_commission(-10, 30)

    def test_rate_out_of_range_raises(self):
        with self.assertRaises(ValueError):
            calculate_commission(100, 101)

    def test_parts_add_up_for_every_catalog_gift(self):
        for gift in GIFT_CATALOG.values():
            recipient_amount, commission = calculate_commission(gift.price, 30)
            self.assertEqual(recipient_amount + commission, gift.price, gift.gift_id)
            self.assertGreaterEqual(recipient_amount, 1)

    def test_default_commission_percent(self):
        self.assertEqual(get_commission_percent(), 30)

    @override_settings(GIFT_COMMISSION_PERCENT=100)
    def test_full_commission_rejected(self):
        with self.assertRaises(ValueError):
            get_commission_percent()


# ============================================================
# Catalog Tests
# ============================================================


class CatalogTest(TestCase):
    def test_get_gift(self):
        gift = get_gift("trophy")
        self.assertEqual(gift.price, 100)
        self.assertEqual(gift.name, "Trophy")

    def test_unknown_gift_raises(self):
        with self.assertRaises(InvalidGift):
            get_gift("unicorn-deluxe")

    @override_settings(GIFT_MAX_PRICE=1000)
    def test_gift_above_max_price_rejected(self):
        self.assertFalse(is_valid_gift_price(50000))
        with self.assertRaises(InvalidGift):
            get_gift("universe")

    def test_catalog_prices_within_bounds(self):
        for gift in GIFT_CATALOG.values():
            self.assertTrue(is_valid_gift_price(gift.price), gift.gift_id)

    def test_coin_package(self):
        package = get_coin_package("coins_495")
        self.assertEqual(package.coins, 495)

    def test_unknown_package_raises(self):
        with self.assertRaises(InvalidPackage):
            get_coin_package("coins_1")


# ============================================================
# Model Tests
# ============================================================


class WalletModelTest(TestCase):
    def setUp(self):
        make_user("alice", balance=0)

    def test_wallet_str(self):
        wallet = Wallet.objects.get(pk="alice")
        self.assertIn("alice", str(wallet))

    def test_negative_balance_rejected_by_database(self):
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Wallet.objects.filter(pk="alice").update(balance=-1)


class LedgerEntryModelTest(TestCase):
    def setUp(self):
        make_user("alice", balance=100)
        self.entry = LedgerEntry.objects.get(wallet_id="alice")

    def test_entry_fields(self):
        self.assertEqual(self.entry.kind, LedgerEntry.Kind.CREDIT)
        self.assertEqual(self.entry.amount, 100)
        self.assertEqual(self.entry.balance_before, 0)
        self.assertEqual(self.entry.balance_after, 100)
        self.assertEqual(self.entry.user_name, "Alice")

    def test_entry_str(self):
        self.assertIn("+100", str(self.entry))

    def test_save_existing_entry_raises(self):
        self.entry.amount = 5
        with self.assertRaises(LedgerEntryImmutable):
            self.entry.save()

    def test_delete_entry_raises(self):
        with self.assertRaises(LedgerEntryImmutable):
            self.entry.delete()

    def test_queryset_update_raises(self):
        with self.assertRaises(LedgerEntryImmutable):
            LedgerEntry.objects.filter(wallet_id="alice").update(amount=1)

    def test_queryset_delete_raises(self):
        with self.assertRaises(LedgerEntryImmutable):
            LedgerEntry.objects.filter(wallet_id="alice").delete()

        self.assertEqual(LedgerEntry.objects.filter(wallet_id="alice").count(), 1)

    def test_inconsistent_arithmetic_rejected_by_database(self):
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                LedgerEntry.objects.create(
                    wallet_id="alice",
                    user_id="alice",
                    kind=LedgerEntry.Kind.CREDIT,
                    amount=10,
                    balance_before=100,
                    balance_after=200,
                )

    def test_sum_for_wallet(self):
        WalletService.debit("alice", 30)
        self.assertEqual(LedgerEntry.sum_for_wallet("alice"), 70)
        self.assertEqual(LedgerEntry.sum_for_wallet("nobody"), 0)


class ContentModelTest(TestCase):
    def test_unlock_cost_from_content_class(self):
        content = Content.objects.create(content_id="d1", title="Drama", is_premium=True)
        self.assertEqual(content.unlock_cost, 99)

    @override_settings(CONTENT_UNLOCK_COSTS={"drama": 99, "movie": 149})
    def test_unlock_cost_per_class(self):
        content = Content.objects.create(
            content_id="m1", title="Movie", content_class="movie", is_premium=True
        )
        self.assertEqual(content.unlock_cost, 149)

    @override_settings(DEFAULT_UNLOCK_COST=50)
    def test_unknown_class_uses_default_cost(self):
        content = Content.objects.create(
            content_id="s1", title="Short", content_class="short", is_premium=True
        )
        self.assertEqual(content.unlock_cost, 50)


class PurchaseRequestModelTest(TestCase):
    def _request(self, **kwargs):
        defaults = {
            "user_id": "alice",
            "coin_amount": 99,
            "paid_amount": "100.00",
            "payment_reference": "ref-1",
        }
        defaults.update(kwargs)
        return PurchaseRequest.objects.create(**defaults)

    def test_default_status_is_pending(self):
        request = self._request()
        self.assertEqual(request.status, "pending_admin_verification")
        self.assertTrue(request.is_pending)

    def test_get_stale_pending(self):
        stale = self._request(requested_at=timezone.now() - timedelta(days=10))
        self._request()
        self._request(
            requested_at=timezone.now() - timedelta(days=10),
            status=PurchaseRequest.Status.APPROVED,
        )

        result = PurchaseRequest.get_stale_pending(7)
        self.assertEqual(result.count(), 1)
        self.assertEqual(result.first().id, stale.id)
