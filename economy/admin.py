from django.contrib import admin, messages

from economy.exceptions import LedgerError
from economy.models import (
    CommissionRecord,
    Content,
    GiftTransfer,
    LedgerEntry,
    PurchaseRequest,
    UserProfile,
    Wallet,
)
from economy.services import PurchaseService


class ReadOnlyAdminMixin:
    """
    Keeps a model browsable in the admin while disabling add, change and
    delete. Balances and ledger rows only change through the services.
    """

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ("uid", "name", "is_active", "gifts_sent_count", "gifts_received_count")
    list_filter = ("is_active",)
    search_fields = ("uid", "name", "phone_number")
    readonly_fields = (
        "gifts_sent_count",
        "gifts_received_count",
        "total_coins_spent_on_gifts",
        "total_coins_earned_from_gifts",
        "created_at",
        "updated_at",
    )


@admin.register(Content)
class ContentAdmin(admin.ModelAdmin):
    list_display = ("content_id", "title", "is_premium", "is_active", "unlock_count", "view_count")
    list_filter = ("is_premium", "is_active", "content_class")
    search_fields = ("content_id", "title")
    readonly_fields = ("unlock_count", "view_count", "created_at", "updated_at")


@admin.register(Wallet)
class WalletAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ("wallet_id", "user_name", "balance", "created_at", "updated_at")
    search_fields = ("wallet_id", "user_name")
    readonly_fields = ("wallet_id", "user", "user_name", "balance", "created_at", "updated_at")


@admin.register(LedgerEntry)
class LedgerEntryAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = (
        "transaction_id",
        "user_id",
        "kind",
        "amount",
        "balance_before",
        "balance_after",
        "reference_id",
        "created_at",
    )
    list_filter = ("kind",)
    search_fields = ("user_id", "reference_id")


@admin.register(GiftTransfer)
class GiftTransferAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = (
        "id",
        "sender_id",
        "recipient_id",
        "gift_name",
        "price",
        "recipient_amount",
        "commission",
        "created_at",
    )
    list_filter = ("gift_rarity", "context")
    search_fields = ("sender_id", "recipient_id", "gift_id")


@admin.register(CommissionRecord)
class CommissionRecordAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ("id", "gift_name", "original_price", "commission_amount", "rate", "created_at")
    search_fields = ("sender_id", "recipient_id")


@admin.register(PurchaseRequest)
class PurchaseRequestAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = (
        "id",
        "user_id",
        "package_id",
        "coin_amount",
        "paid_amount",
        "payment_reference",
        "status",
        "requested_at",
        "processed_at",
    )
    list_filter = ("status", "payment_method")
    search_fields = ("user_id", "payment_reference")
    actions = ("approve_requests", "reject_requests")

    def _process(self, request, queryset, operation, verb):
        done = 0
        for purchase in queryset:
            try:
                operation(purchase.pk, note=f"{verb} by {request.user}")
            except LedgerError as exc:
                self.message_user(request, f"{purchase.pk}: {exc}", level=messages.ERROR)
            else:
                done += 1
        if done:
            self.message_user(request, f"{verb} {done} purchase request(s).", messages.SUCCESS)

    @admin.action(description="Approve selected requests and credit coins")
    def approve_requests(self, request, queryset):
        self._process(request, queryset, PurchaseService.approve, "Approved")

    @admin.action(description="Reject selected requests")
    def reject_requests(self, request, queryset):
        self._process(request, queryset, PurchaseService.reject, "Rejected")
