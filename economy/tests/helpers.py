from economy.models import Content, UserProfile
from economy.services import WalletService


def make_user(uid, name="", balance=None, is_active=True):
    """Create a profile, and a funded wallet when ``balance`` is given."""
    profile = UserProfile.objects.create(
        uid=uid,
        name=name or uid.title(),
        phone_number="+15550100",
        is_active=is_active,
    )
    if balance is not None:
        WalletService.get_or_create_wallet(uid)
        if balance:
            WalletService.credit(uid, balance, description="Test funding")
    return profile


def make_content(content_id="drama-1", title="Midnight Drama", is_premium=True, **kwargs):
    return Content.objects.create(
        content_id=content_id, title=title, is_premium=is_premium, **kwargs
    )


def balance_of(user_id):
    return WalletService.get_wallet(user_id).balance
