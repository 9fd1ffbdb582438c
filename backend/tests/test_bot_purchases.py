"""Bot purchase service tests against an in-memory database."""

import sys
import os

from sqlalchemy import BigInteger

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tycoon.config import settings
from tycoon.money import MAX_SAFE_MONEY
from tycoon.models import Company, MarketplaceSale, Product
from tycoon.services.bot_purchase_service import execute_bot_purchases, get_candidate_products

from factories import NOW, make_company, make_player, make_product


class TestBotPurchases:
    def test_stock_limited_single_product(self, db):
        """$100 product, 50 in stock, $10,000 budget: sells out for $5,000."""
        owner = make_player(db)
        company = make_company(db, owner, balance=0)
        product = make_product(db, company, price=10_000, stock=50, production_cost_percentage=0.5)

        purchases = execute_bot_purchases(db, budget=1_000_000, now=NOW)

        assert purchases == [{
            "product_id": product.id,
            "company_id": company.id,
            "quantity": 50,
            "total_price": 500_000,
        }]
        db.expire_all()
        product = db.get(Product, product.id)
        assert product.stock == 0
        assert product.total_sold == 50
        assert product.total_revenue == 500_000
        assert product.production_cost_percentage == 0.5
        assert db.get(Company, company.id).balance == 500_000

        sales = db.query(MarketplaceSale).all()
        assert len(sales) == 1
        assert sales[0].quantity == 50
        assert sales[0].purchaser_id == "bot"
        assert sales[0].purchaser_type == "bot"
        assert sales[0].total_price == 500_000

    def test_budget_conserved_across_catalog(self, db):
        owner = make_player(db)
        company = make_company(db, owner)
        for i, price in enumerate([500, 2_500, 10_000, 99_000, 250_000, 1_000_000]):
            make_product(db, company, price=price, stock=None, name=f"p{i}", total_sold=i * 30)

        budget = 3_000_000
        purchases = execute_bot_purchases(db, budget=budget, now=NOW)

        spent = sum(p["total_price"] for p in purchases)
        assert 0 < spent <= budget
        db.expire_all()
        assert db.get(Company, company.id).balance == spent
        assert db.query(MarketplaceSale).count() == len(purchases)

    def test_ineligible_products_untouched(self, db):
        owner = make_player(db)
        company = make_company(db, owner)
        inactive = make_product(db, company, is_active=False, name="inactive")
        archived = make_product(db, company, is_archived=True, name="archived")
        pricey = make_product(db, company, price=settings.BOT_PRICE_CEILING_CENTS + 1, name="pricey")
        empty = make_product(db, company, stock=0, name="empty")

        assert execute_bot_purchases(db, budget=1_000_000, now=NOW) == []
        db.expire_all()
        for p in (inactive, archived, pricey, empty):
            assert db.get(Product, p.id).total_sold == 0
        assert db.query(MarketplaceSale).count() == 0

    def test_unlimited_stock_stays_unlimited(self, db):
        owner = make_player(db)
        company = make_company(db, owner)
        product = make_product(db, company, price=10_000, stock=None)

        execute_bot_purchases(db, budget=1_000_000, now=NOW)
        db.expire_all()
        assert db.get(Product, product.id).stock is None
        assert db.get(Product, product.id).total_sold == 100

    def test_candidates_ordered_by_revenue_and_capped(self, db, monkeypatch):
        owner = make_player(db)
        company = make_company(db, owner)
        low = make_product(db, company, total_revenue=10, name="low")
        high = make_product(db, company, total_revenue=1_000, name="high")
        make_product(db, company, total_revenue=0, name="none")

        candidates = get_candidate_products(db, limit=2, price_ceiling=settings.BOT_PRICE_CEILING_CENTS)
        assert [p.id for p in candidates] == [high.id, low.id]

        monkeypatch.setattr(settings, "BOT_MAX_PRODUCTS", 1)
        purchases = execute_bot_purchases(db, budget=1_000_000, now=NOW)
        assert [p["product_id"] for p in purchases] == [high.id]

    def test_no_products_no_op(self, db):
        assert execute_bot_purchases(db, budget=1_000_000, now=NOW) == []

    def test_unit_counter_overflow_skips_purchase(self, db):
        owner = make_player(db)
        company = make_company(db, owner)
        product = make_product(db, company, price=1, stock=None, total_sold=MAX_SAFE_MONEY - 10)

        assert execute_bot_purchases(db, budget=1_000, now=NOW) == []
        db.expire_all()
        assert db.get(Product, product.id).total_sold == MAX_SAFE_MONEY - 10
        assert db.get(Company, company.id).balance == 0
        assert db.query(MarketplaceSale).count() == 0

    def test_unit_counters_are_64_bit(self):
        """Cheap unlimited products sell millions of units per tick."""
        assert isinstance(Product.__table__.c.total_sold.type, BigInteger)
        assert isinstance(MarketplaceSale.__table__.c.quantity.type, BigInteger)
