"""Tests for social contribution, income withholding and benefit fund."""

import pytest

from settlecalc.sdk import (
    SettlementInputError,
    calc_contribution,
    calc_fund_deposit,
    calc_fund_penalty,
    calc_income_withholding,
)


# === SOCIAL CONTRIBUTION ===


class TestContribution:

    def test_employee_bracket(self, rules):
        result = calc_contribution(3000, rules)
        assert result.rate == 0.12
        assert result.amount == pytest.approx(258.82)
        assert result.capped is False

    def test_zero_base(self, rules):
        result = calc_contribution(0, rules)
        assert result.amount == 0.0
        assert result.rate == 0.0

    def test_base_above_ceiling_is_capped(self, rules):
        """Any base above the ceiling pays the same as the ceiling."""
        at_ceiling = calc_contribution(rules.contribution.ceiling, rules)
        above = calc_contribution(20_000, rules)

        assert above.capped is True
        assert above.base == 20_000
        assert above.taxable_base == rules.contribution.ceiling
        assert above.amount == pytest.approx(at_ceiling.amount)
        assert above.amount == pytest.approx(7786.02 * 0.14 - 181.18)

    def test_partner_flat_rate(self, rules):
        result = calc_contribution(5000, rules, subject_kind="partner")
        assert result.rate == 0.11
        assert result.amount == pytest.approx(550.0)

    def test_partner_capped(self, rules):
        result = calc_contribution(10_000, rules, subject_kind="partner")
        assert result.capped is True
        assert result.amount == pytest.approx(7786.02 * 0.11)

    def test_negative_base_rejected(self, rules):
        with pytest.raises(SettlementInputError):
            calc_contribution(-1, rules)


# === INCOME WITHHOLDING ===


class TestWithholding:

    def test_base_is_net_of_contribution(self, rules):
        result = calc_income_withholding(3000, 258.82, 0, rules)
        assert result.taxable_base == pytest.approx(2741.18)
        assert result.rate == 0.075
        assert result.amount == pytest.approx(36.15, abs=0.005)

    def test_contribution_changes_withholding(self, rules):
        """Withholding depends on the contribution computed before it."""
        with_contribution = calc_income_withholding(3000, 258.82, 0, rules)
        without = calc_income_withholding(3000, 0, 0, rules)
        assert without.amount > with_contribution.amount

    def test_dependents_reduce_base(self, rules):
        result = calc_income_withholding(3000, 258.82, 1, rules)
        assert result.dependent_deduction == pytest.approx(189.59)
        assert result.taxable_base == pytest.approx(2741.18 - 189.59)
        assert result.amount == pytest.approx((2741.18 - 189.59) * 0.075 - 169.44)

    def test_exempt_bracket_reports_zero_rate(self, rules):
        result = calc_income_withholding(2000, 158.82, 0, rules)
        assert result.amount == 0.0
        assert result.rate == 0.0

    def test_deductions_larger_than_base_floor_at_zero(self, rules):
        result = calc_income_withholding(500, 37.5, 5, rules)
        assert result.taxable_base == 0.0
        assert result.amount == 0.0

    def test_top_bracket(self, rules):
        result = calc_income_withholding(10_000, 0, 0, rules)
        assert result.rate == 0.275
        assert result.amount == pytest.approx(10_000 * 0.275 - 896)

    def test_negative_dependents_rejected(self, rules):
        with pytest.raises(SettlementInputError):
            calc_income_withholding(3000, 0, -1, rules)


# === BENEFIT FUND ===


class TestFund:

    def test_deposit_is_flat_rate(self, rules):
        assert calc_fund_deposit(3000, rules) == pytest.approx(240.0)

    def test_penalty_on_balance(self, rules):
        assert calc_fund_penalty(8000, rules) == pytest.approx(3200.0)

    def test_negative_balance_rejected(self, rules):
        with pytest.raises(SettlementInputError):
            calc_fund_penalty(-10, rules)
