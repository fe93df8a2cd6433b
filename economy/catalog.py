from dataclasses import dataclass
from decimal import Decimal

from django.conf import settings

from economy.exceptions import InvalidGift, InvalidPackage


@dataclass(frozen=True)
class Gift:
    gift_id: str
    name: str
    emoji: str
    price: int
    rarity: str


@dataclass(frozen=True)
class CoinPackage:
    package_id: str
    name: str
    coins: int
    price: Decimal


COMMON = "common"
UNCOMMON = "uncommon"
RARE = "rare"
EPIC = "epic"
LEGENDARY = "legendary"
MYTHIC = "mythic"
ULTIMATE = "ultimate"


def _gift(gift_id, price, name, emoji, rarity):
    return gift_id, Gift(gift_id=gift_id, name=name, emoji=emoji, price=price, rarity=rarity)


GIFT_CATALOG = dict(
    [
        # Popular
        _gift("heart", 10, "Heart", "❤️", COMMON),
        _gift("thumbs_up", 15, "Thumbs Up", "👍", COMMON),
        _gift("clap", 25, "Applause", "👏", UNCOMMON),
        _gift("fire", 50, "Fire", "🔥", RARE),
        _gift("star", 75, "Star", "⭐", RARE),
        _gift("crown", 150, "Crown", "👑", EPIC),
        _gift("kiss", 35, "Kiss", "💋", UNCOMMON),
        _gift("muscle", 40, "Strong", "💪", UNCOMMON),
        # Emotions
        _gift("love_eyes", 20, "Love Eyes", "😍", COMMON),
        _gift("laugh", 15, "Laughing", "😂", COMMON),
        _gift("cool", 30, "Cool", "😎", UNCOMMON),
        _gift("party", 40, "Party", "🥳", RARE),
        _gift("mind_blown", 60, "Mind Blown", "🤯", RARE),
        _gift("angel", 45, "Angel", "😇", RARE),
        # Animals
        _gift("cat", 25, "Cat", "🐱", COMMON),
        _gift("dog", 25, "Dog", "🐶", COMMON),
        _gift("lion", 65, "Lion", "🦁", RARE),
        _gift("dragon", 180, "Dragon", "🐉", EPIC),
        _gift("phoenix", 350, "Phoenix", "🔥🦅", LEGENDARY),
        # Luxury
        _gift("trophy", 100, "Trophy", "🏆", RARE),
        _gift("rocket", 120, "Rocket", "🚀", EPIC),
        _gift("diamond", 200, "Diamond", "💎", EPIC),
        _gift("money_bag", 250, "Money Bag", "💰", EPIC),
        _gift("unicorn", 300, "Unicorn", "🦄", LEGENDARY),
        _gift("rainbow", 500, "Rainbow", "🌈", LEGENDARY),
        _gift("sports_car", 800, "Sports Car", "🏎️", LEGENDARY),
        _gift("mansion", 1200, "Mansion", "🏰", LEGENDARY),
        _gift("yacht", 2500, "Yacht", "🛥️", MYTHIC),
        _gift("private_jet", 5000, "Private Jet", "🛩️", MYTHIC),
        # Food
        _gift("coffee", 35, "Coffee", "☕", UNCOMMON),
        _gift("cake", 55, "Birthday Cake", "🎂", RARE),
        _gift("champagne", 80, "Champagne", "🍾", RARE),
        # Nature
        _gift("flower", 20, "Flower", "🌸", COMMON),
        _gift("rose", 45, "Rose", "🌹", UNCOMMON),
        _gift("bouquet", 85, "Bouquet", "💐", RARE),
        # Celestial
        _gift("moon", 100, "Moon", "🌙", RARE),
        _gift("sun", 150, "Sun", "☀️", EPIC),
        _gift("shooting_star", 250, "Shooting Star", "💫", EPIC),
        _gift("supernova", 1500, "Supernova", "💥⭐", MYTHIC),
        # Ultra premium
        _gift("golden_crown", 1000, "Golden Crown", "👑✨", MYTHIC),
        _gift("diamond_ring", 2000, "Diamond Ring", "💍", MYTHIC),
        _gift("palace", 8000, "Royal Palace", "🏰👑", ULTIMATE),
        _gift("big_bang", 10000, "Big Bang", "💥🌌", ULTIMATE),
        _gift("space_trip", 15000, "Space Trip", "🚀🌌", ULTIMATE),
        _gift("galaxy", 25000, "Own a Galaxy", "🌌⭐", ULTIMATE),
        _gift("universe", 50000, "The Universe", "🌌✨🪐", ULTIMATE),
    ]
)

COIN_PACKAGES = {
    "coins_99": CoinPackage("coins_99", "Starter Pack", 99, Decimal("100.00")),
    "coins_495": CoinPackage("coins_495", "Popular Pack", 495, Decimal("500.00")),
    "coins_990": CoinPackage("coins_990", "Value Pack", 990, Decimal("1000.00")),
}


def is_valid_gift_price(price: int) -> bool:
    min_price = getattr(settings, "GIFT_MIN_PRICE", 10)
    max_price = getattr(settings, "GIFT_MAX_PRICE", 100000)
    return min_price <= price <= max_price


def get_gift(gift_id: str) -> Gift:
    """Look up a catalog gift, rejecting unknown ids and out-of-range prices."""
    gift = GIFT_CATALOG.get(gift_id)
    if gift is None:
        raise InvalidGift(f"Invalid gift id {gift_id!r}.")
    if not is_valid_gift_price(gift.price):
        raise InvalidGift(f"Gift {gift_id!r} has an invalid price {gift.price}.")
    return gift


def get_coin_package(package_id: str) -> CoinPackage:
    package = COIN_PACKAGES.get(package_id)
    if package is None:
        raise InvalidPackage(f"Invalid package id {package_id!r}.")
    return package
