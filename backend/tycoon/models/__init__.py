"""SQLAlchemy ORM models."""

from tycoon.models.player import Player
from tycoon.models.company import Company
from tycoon.models.product import Product
from tycoon.models.stock import Stock, StockPriceHistory, StockHolding
from tycoon.models.crypto import Cryptocurrency, CryptoPriceHistory, CryptoWallet
from tycoon.models.loan import Loan
from tycoon.models.marketplace_sale import MarketplaceSale, BOT_PURCHASER
from tycoon.models.tick import TickHistory, TickLease

__all__ = [
    "Player",
    "Company",
    "Product",
    "Stock",
    "StockPriceHistory",
    "StockHolding",
    "Cryptocurrency",
    "CryptoPriceHistory",
    "CryptoWallet",
    "Loan",
    "MarketplaceSale",
    "BOT_PURCHASER",
    "TickHistory",
    "TickLease",
]
