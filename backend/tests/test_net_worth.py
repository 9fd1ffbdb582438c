"""Tests for the net worth formula (no DB)."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tycoon.net_worth import CompanyEquity, NetWorthInputs, compute_net_worth, crypto_holding_value


class TestNetWorth:
    def test_reference_player(self):
        """Cash 500,000 + 10 shares at 2,000 + private company 1,200,000 - loan 300,000."""
        result = compute_net_worth(NetWorthInputs(
            cash=500_000,
            stock_positions=[(10, 2_000)],
            companies=[CompanyEquity(balance=1_200_000, is_public=False)],
            loan_balances=[300_000],
        ))
        assert result.stock_value == 20_000
        assert result.crypto_value == 0
        assert result.company_equity == 1_200_000
        assert result.loan_debt == 300_000
        assert result.total == 1_420_000

    def test_public_company_adds_market_cap(self):
        result = compute_net_worth(NetWorthInputs(
            cash=0,
            companies=[CompanyEquity(balance=100, is_public=True, market_cap=5_000)],
        ))
        assert result.company_equity == 5_100

    def test_private_company_market_cap_ignored(self):
        result = compute_net_worth(NetWorthInputs(
            cash=0,
            companies=[CompanyEquity(balance=100, is_public=False, market_cap=5_000)],
        ))
        assert result.company_equity == 100

    def test_fractional_coins_round(self):
        assert crypto_holding_value(0.5, 3) == 2
        assert crypto_holding_value(1.25, 1_000) == 1_250

    def test_negative_cash_allowed(self):
        result = compute_net_worth(NetWorthInputs(cash=-69, loan_balances=[100_069]))
        assert result.total == -100_138

    def test_recompute_is_stable(self):
        inputs = NetWorthInputs(
            cash=123,
            stock_positions=[(3, 7), (1, 1_000)],
            crypto_positions=[(0.333, 3_000)],
            companies=[CompanyEquity(10, True, 20)],
            loan_balances=[5],
        )
        assert compute_net_worth(inputs) == compute_net_worth(inputs)
