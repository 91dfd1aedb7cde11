"""Tests for the rubrica ledger and the payroll recompute pass."""

import logging

import pytest

from settlecalc.sdk import (
    CONTRIBUTION_RUBRICA,
    WITHHOLDING_RUBRICA,
    Employee,
    PayrollEvent,
    Rubrica,
    RubricaLedger,
    SettlementInputError,
)


# === FIXTURES ===


@pytest.fixture
def overtime():
    return Rubrica(
        id="overtime", code="200", description="Overtime 50%", kind="earning",
        affects_contribution=True, affects_fund=True, affects_withholding=True,
        auto_rule="overtime",
    )


@pytest.fixture
def bonus():
    return Rubrica(
        id="bonus", code="210", description="Bonus", kind="earning",
        affects_contribution=True, affects_fund=True, affects_withholding=True,
    )


@pytest.fixture
def meal_allowance():
    """Earning that feeds no taxable base."""
    return Rubrica(id="meal", code="220", description="Meal allowance", kind="earning")


@pytest.fixture
def advance():
    return Rubrica(id="advance", code="300", description="Salary advance", kind="deduction")


def system_events(result):
    return [e for e in result.events if e.rubrica.is_system]


# === SEEDING AND RECOMPUTE ===


class TestSeededLedger:
    """A new ledger holds the base compensation event plus the two system events."""

    def test_seeded_with_base_salary(self, employee, rules):
        ledger = RubricaLedger(employee, rules)

        assert [e.id for e in ledger.events] == ["base_salary"]
        assert ledger.events[0].earning_amount == 3000.0
        assert ledger.events[0].reference == 30

    def test_system_events_appended_last(self, employee, rules):
        result = RubricaLedger(employee, rules).result

        assert [e.id for e in result.events] == ["base_salary", "contribution", "withholding"]
        assert result.events[-2].rubrica.code == "901"
        assert result.events[-1].rubrica.code == "902"

    def test_gross_to_net(self, employee, rules):
        result = RubricaLedger(employee, rules).result

        assert result.contribution.amount == pytest.approx(258.82)
        assert result.withholding.amount == pytest.approx(36.1485)
        assert result.net == pytest.approx(3000 - 258.82 - 36.1485)
        assert result.fund_amount == pytest.approx(240.0)

    def test_system_event_reference_is_rate_percent(self, employee, rules):
        contribution, withholding = system_events(RubricaLedger(employee, rules).result)
        assert contribution.reference == pytest.approx(12.0)
        assert withholding.reference == pytest.approx(7.5)

    def test_zero_salary_still_has_system_events(self, rules, employee):
        ledger = RubricaLedger(employee.model_copy(update={"salary": 0.0}), rules)
        result = ledger.result

        assert [e.id for e in system_events(result)] == ["contribution", "withholding"]
        assert all(e.deduction_amount == 0 for e in system_events(result))
        assert result.net == 0

    def test_recompute_is_idempotent(self, employee, rules, bonus):
        ledger = RubricaLedger(employee, rules)
        ledger.add_event(bonus)
        ledger.update_event("bonus", "earning_amount", 750)

        first = ledger.recompute()
        second = ledger.recompute()
        assert first == second
        assert len(system_events(second)) == 2

    def test_stored_system_events_are_discarded(self, employee, rules):
        stale = [
            PayrollEvent.for_rubrica(employee.base_rubrica(), reference=30, earning_amount=3000),
            PayrollEvent.for_rubrica(CONTRIBUTION_RUBRICA, deduction_amount=999),
            PayrollEvent.for_rubrica(WITHHOLDING_RUBRICA, deduction_amount=999),
        ]
        ledger = RubricaLedger(employee, rules, events=stale)

        assert [e.id for e in ledger.events] == ["base_salary"]
        assert ledger.result.contribution.amount == pytest.approx(258.82)

    def test_duplicate_stored_events_rejected(self, employee, rules, bonus):
        events = [PayrollEvent.for_rubrica(bonus), PayrollEvent.for_rubrica(bonus)]
        with pytest.raises(SettlementInputError, match="already has an event"):
            RubricaLedger(employee, rules, events=events)

    def test_partner_has_no_fund_deposit(self, partner, rules):
        result = RubricaLedger(partner, rules).result

        assert result.events[0].id == "pro_labore"
        assert result.fund_base == 0
        assert result.fund_amount == 0
        assert result.contribution.amount == pytest.approx(550.0)
        assert result.withholding.amount == pytest.approx(4450 * 0.225 - 662.77)


# === TOTALS ===


class TestTotals:

    def test_totals_sum_every_event(self, employee, rules, bonus, advance):
        ledger = RubricaLedger(employee, rules)
        ledger.add_event(bonus)
        ledger.update_event("bonus", "earning_amount", 500)
        ledger.add_event(advance)
        result = ledger.update_event("advance", "deduction_amount", 400)

        assert result.total_earnings == sum(e.earning_amount for e in result.events)
        assert result.total_deductions == sum(e.deduction_amount for e in result.events)
        assert result.net == result.total_earnings - result.total_deductions

    def test_incidence_flags_select_bases(self, employee, rules, meal_allowance):
        ledger = RubricaLedger(employee, rules)
        ledger.add_event(meal_allowance)
        result = ledger.update_event("meal", "earning_amount", 600)

        assert result.total_earnings == pytest.approx(3600)
        assert result.contribution_base == pytest.approx(3000)
        assert result.withholding_base == pytest.approx(3000)
        assert result.fund_base == pytest.approx(3000)

    def test_rounded_presentation(self, employee, rules):
        data = RubricaLedger(employee, rules).result.rounded()
        assert data["net"] == 2705.03
        assert data["events"][-2]["deduction_amount"] == 258.82


# === MUTATIONS ===


class TestAddEvent:

    def test_add_recomputes(self, employee, rules, bonus):
        ledger = RubricaLedger(employee, rules)
        ledger.add_event(bonus)
        result = ledger.update_event("bonus", "earning_amount", 1000)

        assert result.contribution_base == pytest.approx(4000)
        assert result.contribution.amount == pytest.approx(4000 * 0.12 - 101.18)

    def test_non_automatic_starts_at_zero(self, employee, rules, bonus):
        ledger = RubricaLedger(employee, rules)
        ledger.add_event(bonus, reference=2)

        event = ledger.get_event("bonus")
        assert event.reference == 2
        assert event.earning_amount == 0

    def test_duplicate_rejected(self, employee, rules, bonus):
        ledger = RubricaLedger(employee, rules)
        ledger.add_event(bonus)
        with pytest.raises(SettlementInputError, match="already has an event"):
            ledger.add_event(bonus)

    def test_system_rubrica_rejected(self, employee, rules):
        ledger = RubricaLedger(employee, rules)
        with pytest.raises(SettlementInputError, match="system-derived"):
            ledger.add_event(CONTRIBUTION_RUBRICA)

    def test_negative_reference_rejected(self, employee, rules, overtime):
        ledger = RubricaLedger(employee, rules)
        with pytest.raises(SettlementInputError):
            ledger.add_event(overtime, reference=-1)

    @pytest.mark.parametrize("event_id", ["contribution", "withholding"])
    def test_system_event_id_rejected(self, employee, rules, event_id):
        ledger = RubricaLedger(employee, rules)
        clash = Rubrica(id=event_id, code="400", description="Clash", kind="deduction")

        with pytest.raises(SettlementInputError, match="reserved"):
            ledger.add_event(clash)
        assert [e.id for e in ledger.result.events].count(event_id) == 1

    def test_stored_event_with_system_id_rejected(self, employee, rules):
        clash = Rubrica(id="withholding", code="400", description="Clash", kind="deduction")
        with pytest.raises(SettlementInputError, match="reserved"):
            RubricaLedger(employee, rules, events=[PayrollEvent.for_rubrica(clash)])


class TestUpdateEvent:

    def test_unknown_field_rejected(self, employee, rules, bonus):
        ledger = RubricaLedger(employee, rules)
        ledger.add_event(bonus)
        with pytest.raises(SettlementInputError, match="Unknown event field"):
            ledger.update_event("bonus", "rubrica", 1)

    def test_negative_value_rejected(self, employee, rules, bonus):
        ledger = RubricaLedger(employee, rules)
        ledger.add_event(bonus)
        with pytest.raises(SettlementInputError, match="non-negative"):
            ledger.update_event("bonus", "earning_amount", -5)

    def test_non_numeric_value_rejected(self, employee, rules, bonus):
        ledger = RubricaLedger(employee, rules)
        ledger.add_event(bonus)
        with pytest.raises(SettlementInputError, match="non-negative number"):
            ledger.update_event("bonus", "earning_amount", "500")

    def test_unknown_event_rejected(self, employee, rules):
        ledger = RubricaLedger(employee, rules)
        with pytest.raises(SettlementInputError, match="No event"):
            ledger.update_event("missing", "earning_amount", 5)

    def test_protected_event_is_noop(self, employee, rules, caplog):
        ledger = RubricaLedger(employee, rules)
        before = ledger.result

        with caplog.at_level(logging.WARNING):
            after = ledger.update_event("base_salary", "earning_amount", 99_999)

        assert after == before
        assert ledger.get_event("base_salary").earning_amount == 3000.0
        assert "protected" in caplog.text


class TestRemoveEvent:

    def test_remove_user_event(self, employee, rules, bonus):
        ledger = RubricaLedger(employee, rules)
        ledger.add_event(bonus)
        ledger.update_event("bonus", "earning_amount", 800)

        assert ledger.remove_event("bonus") is True
        assert [e.id for e in ledger.events] == ["base_salary"]
        assert ledger.result.total_earnings == pytest.approx(3000)

    def test_base_salary_cannot_be_removed(self, employee, rules):
        ledger = RubricaLedger(employee, rules)
        before = ledger.result

        assert ledger.remove_event("base_salary") is False
        assert ledger.result == before

    @pytest.mark.parametrize("event_id", ["contribution", "withholding"])
    def test_system_events_cannot_be_removed(self, employee, rules, event_id):
        ledger = RubricaLedger(employee, rules)
        before = ledger.result

        assert ledger.remove_event(event_id) is False
        assert ledger.result == before
        assert len(system_events(ledger.result)) == 2

    def test_unknown_event_rejected(self, employee, rules):
        ledger = RubricaLedger(employee, rules)
        with pytest.raises(SettlementInputError):
            ledger.remove_event("missing")


# === AUTOMATIC EVENTS ===


class TestAutomaticEvents:

    def test_overtime_from_hours(self, employee, rules, overtime):
        ledger = RubricaLedger(employee, rules)
        ledger.add_event(overtime, reference=10)

        event = ledger.get_event("overtime")
        assert event.reference == 10
        assert event.earning_amount == pytest.approx(3000 / 220 * 1.5 * 10)

    def test_overtime_reference_update_rederives_amount(self, employee, rules, overtime):
        ledger = RubricaLedger(employee, rules)
        ledger.add_event(overtime, reference=10)
        ledger.update_event("overtime", "reference", 20)

        assert ledger.get_event("overtime").earning_amount == pytest.approx(3000 / 220 * 1.5 * 20)

    def test_night_shift(self, employee, rules):
        rubrica = Rubrica(
            id="night", code="230", description="Night shift", kind="earning",
            affects_contribution=True, auto_rule="night_shift",
        )
        ledger = RubricaLedger(employee, rules)
        ledger.add_event(rubrica, reference=22)
        assert ledger.get_event("night").earning_amount == pytest.approx(3000 / 220 * 0.20 * 22)

    def test_transport_voucher_deduction(self, employee, rules):
        rubrica = Rubrica(
            id="transport", code="310", description="Transport voucher", kind="deduction",
            auto_rule="transport_voucher",
        )
        ledger = RubricaLedger(employee, rules)
        result = ledger.add_event(rubrica)

        event = ledger.get_event("transport")
        assert event.deduction_amount == pytest.approx(180.0)
        assert event.reference == pytest.approx(6.0)
        assert result.total_deductions == pytest.approx(180 + 258.82 + 36.1485)

    def test_hazard_pay(self, employee, rules):
        rubrica = Rubrica(
            id="hazard", code="240", description="Hazard pay", kind="earning",
            affects_contribution=True, auto_rule="hazard",
        )
        ledger = RubricaLedger(employee, rules)
        ledger.add_event(rubrica)
        assert ledger.get_event("hazard").earning_amount == pytest.approx(900.0)

    def test_unhealthy_graded_on_minimum_wage(self, employee, rules):
        rubrica = Rubrica(
            id="unhealthy", code="250", description="Unhealthy work", kind="earning",
            auto_rule="unhealthy", auto_rate=0.20,
        )
        ledger = RubricaLedger(employee, rules)
        ledger.add_event(rubrica)
        assert ledger.get_event("unhealthy").earning_amount == pytest.approx(1412 * 0.20)

    def test_unhealthy_without_grade_rejected(self, employee, rules):
        rubrica = Rubrica(
            id="unhealthy", code="250", description="Unhealthy work", kind="earning",
            auto_rule="unhealthy",
        )
        ledger = RubricaLedger(employee, rules)
        with pytest.raises(SettlementInputError, match="auto_rate"):
            ledger.add_event(rubrica)

    def test_family_allowance_under_income_limit(self, employee_with_dependents, rules):
        rubrica = Rubrica(
            id="family", code="260", description="Family allowance", kind="earning",
            auto_rule="family_allowance",
        )
        ledger = RubricaLedger(employee_with_dependents, rules)
        ledger.add_event(rubrica)

        event = ledger.get_event("family")
        assert event.reference == 2
        assert event.earning_amount == pytest.approx(2 * 62.04)

    def test_family_allowance_over_income_limit(self, rules):
        subject = Employee.model_validate({
            "salary": 2500,
            "admitted_on": "2022-01-01",
            "dependents": [{"name": "Leo", "family_allowance_eligible": True}],
        })
        rubrica = Rubrica(
            id="family", code="260", description="Family allowance", kind="earning",
            auto_rule="family_allowance",
        )
        ledger = RubricaLedger(subject, rules)
        ledger.add_event(rubrica)
        assert ledger.get_event("family").earning_amount == 0

    def test_refresh_follows_ledger_changes(self, employee_with_dependents, rules, bonus):
        family = Rubrica(
            id="family", code="260", description="Family allowance", kind="earning",
            auto_rule="family_allowance",
        )
        ledger = RubricaLedger(employee_with_dependents, rules)
        ledger.add_event(family)
        ledger.add_event(bonus)
        ledger.update_event("bonus", "earning_amount", 1000)

        ledger.refresh_automatic_events()
        assert ledger.get_event("family").earning_amount == 0


# === SNAPSHOT ===


def test_snapshot_is_plain_data(employee, rules):
    snapshot = RubricaLedger(employee, rules).snapshot()

    assert [e["id"] for e in snapshot["events"]] == ["base_salary"]
    assert snapshot["result"]["net"] == 2705.03
