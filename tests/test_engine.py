from decimal import Decimal

import pytest

from br_financing.data_models import LoanRequest
from br_financing.engine import (
    calculate_debt_trajectory,
    generate_price_schedule,
    generate_sac_schedule,
    normalize_annual_rate,
)
from br_financing.errors import CalculationError, RateDomainError, ZeroTermError


def _request(principal="12000", rate="12", term=12):
    return LoanRequest(principal=Decimal(principal), annual_rate_percent=Decimal(rate), term_months=term)


def test_normalize_twelve_percent_is_just_below_one_percent():
    monthly = normalize_annual_rate(Decimal("12"))
    assert Decimal("0.0094") < monthly < Decimal("0.0095")


def test_normalize_is_compound_not_linear():
    monthly = normalize_annual_rate(Decimal("12"))
    assert monthly < Decimal("0.01")
    # Twelve months of compounding give back the annual growth
    assert abs((1 + monthly) ** 12 - Decimal("1.12")) < Decimal("1e-20")


def test_normalize_zero_rate():
    assert normalize_annual_rate(Decimal(0)) == 0


def test_normalize_accepts_int_and_str():
    assert normalize_annual_rate(12) == normalize_annual_rate("12") == normalize_annual_rate(Decimal("12"))


def test_normalize_rejects_float():
    with pytest.raises(TypeError):
        normalize_annual_rate(12.0)


def test_normalize_negative_rate_above_minus_hundred():
    monthly = normalize_annual_rate(Decimal("-5"))
    assert Decimal("-0.005") < monthly < 0


@pytest.mark.parametrize("annual", ["-100", "-150"])
def test_normalize_rejects_non_positive_base(annual):
    with pytest.raises(RateDomainError) as ei:
        normalize_annual_rate(Decimal(annual))
    assert ei.value.annual_rate_percent == Decimal(annual)
    assert isinstance(ei.value, CalculationError)


def test_trajectory_scenario_a():
    result = calculate_debt_trajectory(_request())

    sac = result.sac_schedule
    assert sac.fixed_principal_portion == Decimal("1000.00")
    assert sac.first_payment == Decimal("1113.87")
    assert sac.last_payment == Decimal("1009.49")
    assert sac.total_paid == Decimal("12740.13")

    price = result.price_schedule
    assert price.fixed_payment == Decimal("1062.74")
    assert price.total_paid == Decimal("12752.94")


def test_trajectory_echoes_unrounded_principal():
    result = calculate_debt_trajectory(_request(principal="12000.005"))
    assert result.initial_principal == Decimal("12000.005")
    assert str(result.initial_principal) == "12000.005"


def test_trajectory_uses_normalized_rate():
    result = calculate_debt_trajectory(_request())
    assert result.monthly_rate == normalize_annual_rate(Decimal("12"))


def test_trajectory_scenario_c_long_term():
    result = calculate_debt_trajectory(_request(principal="360000", rate="10.5", term=420))

    sac = result.sac_schedule
    expected = Decimal(360000) / Decimal(420)
    assert sac.fixed_principal_portion == Decimal("857.14")
    assert len(sac.periods) == 420
    assert all(p.principal_portion == expected for p in sac.periods)
    assert len(result.price_schedule.periods) == 420
    assert sac.first_payment > sac.last_payment


def test_trajectory_is_deterministic():
    first = calculate_debt_trajectory(_request(principal="360000", rate="10.5", term=420))
    second = calculate_debt_trajectory(_request(principal="360000", rate="10.5", term=420))
    assert first == second


@pytest.mark.parametrize("term", [1, 2, 12, 360])
def test_period_count_matches_term(term):
    result = calculate_debt_trajectory(_request(principal="250000", rate="9.5", term=term))
    assert len(result.sac_schedule.periods) == term
    assert len(result.price_schedule.periods) == term


def test_sac_principal_portion_is_constant():
    rate = normalize_annual_rate(Decimal("10.5"))
    sac = generate_sac_schedule(Decimal("100000"), rate, 240)
    expected = Decimal("100000") / Decimal(240)
    assert {p.principal_portion for p in sac.periods} == {expected}


def test_sac_interest_is_non_increasing():
    rate = normalize_annual_rate(Decimal("10.5"))
    sac = generate_sac_schedule(Decimal("100000"), rate, 240)
    interests = [p.interest_portion for p in sac.periods]
    assert all(a >= b for a, b in zip(interests, interests[1:]))


def test_sac_first_period_interest_is_balance_times_rate():
    rate = normalize_annual_rate(Decimal("12"))
    sac = generate_sac_schedule(Decimal("12000"), rate, 12)
    assert sac.periods[0].interest_portion == Decimal("12000") * rate
    assert sac.periods[0].remaining_balance == Decimal("11000")


def test_price_payment_is_constant():
    rate = normalize_annual_rate(Decimal("10.5"))
    price = generate_price_schedule(Decimal("360000"), rate, 420)
    payments = [p.principal_portion + p.interest_portion for p in price.periods]
    for payment in payments:
        assert abs(payment - payments[0]) < Decimal("1e-18")
        assert abs(payment - price.fixed_payment) <= Decimal("0.005")


def test_price_principal_portion_grows():
    rate = normalize_annual_rate(Decimal("12"))
    price = generate_price_schedule(Decimal("12000"), rate, 12)
    portions = [p.principal_portion for p in price.periods]
    assert all(a < b for a, b in zip(portions, portions[1:]))


def test_price_balance_follows_principal_portion():
    rate = normalize_annual_rate(Decimal("12"))
    price = generate_price_schedule(Decimal("12000"), rate, 12)
    first = price.periods[0]
    assert first.interest_portion == Decimal("12000") * rate
    assert first.remaining_balance == Decimal("12000") - first.principal_portion


@pytest.mark.parametrize(
    "principal, rate, term",
    [("12000", "12", 12), ("360000", "10.5", 420), ("100000", "7", 7)],
)
def test_final_balance_is_zero(principal, rate, term):
    result = calculate_debt_trajectory(_request(principal=principal, rate=rate, term=term))
    assert result.sac_schedule.periods[-1].remaining_balance == 0
    assert result.price_schedule.periods[-1].remaining_balance == 0


@pytest.mark.parametrize(
    "principal, rate, term",
    [("999999.99", "3.3", 359), ("50000", "0", 36), ("1000", "25", 1)],
)
def test_final_balance_residue_is_negligible(principal, rate, term):
    # Inexact principal / term can leave a sub-cent residue after clamping
    # (see "Clamping" in DESIGN.md)
    result = calculate_debt_trajectory(_request(principal=principal, rate=rate, term=term))
    for schedule in (result.sac_schedule, result.price_schedule):
        final = schedule.periods[-1].remaining_balance
        assert final >= 0
        assert final < Decimal("1e-12")


@pytest.mark.parametrize("rate", ["1E-30", "-1E-30"])
def test_price_rate_below_precision_is_straight_line(rate):
    price = generate_price_schedule(Decimal("1000"), Decimal(rate), 12)
    assert price.fixed_payment == Decimal("83.33")
    assert price.total_paid == Decimal("1000.00")
    assert len(price.periods) == 12
    assert price.periods[-1].remaining_balance < Decimal("1e-12")


def test_balances_are_never_negative():
    result = calculate_debt_trajectory(_request(principal="360000", rate="10.5", term=420))
    for schedule in (result.sac_schedule, result.price_schedule):
        assert all(p.remaining_balance >= 0 for p in schedule.periods)


def test_price_zero_rate_is_straight_line():
    price = generate_price_schedule(Decimal("1200"), Decimal(0), 12)
    assert price.fixed_payment == Decimal("100.00")
    assert price.total_paid == Decimal("1200.00")
    assert all(p.interest_portion == 0 for p in price.periods)
    assert price.periods[-1].remaining_balance == 0


def test_zero_rate_trajectory_costs_the_same():
    result = calculate_debt_trajectory(_request(principal="1200", rate="0", term=12))
    assert result.price_schedule.fixed_payment == Decimal("100.00")
    assert result.sac_schedule.first_payment == Decimal("100.00")
    assert result.sac_schedule.last_payment == Decimal("100.00")
    assert result.price_schedule.total_paid == result.sac_schedule.total_paid == Decimal("1200.00")
    assert result.cheaper_system() == "equal"


def test_single_period_repays_everything():
    rate = normalize_annual_rate(Decimal("12"))
    sac = generate_sac_schedule(Decimal("1000"), rate, 1)
    assert sac.first_payment == sac.last_payment
    assert sac.periods[0].remaining_balance == 0


def test_negative_rate_still_amortizes():
    result = calculate_debt_trajectory(_request(principal="12000", rate="-5", term=12))
    assert result.price_schedule.total_paid < Decimal("12000")
    assert result.sac_schedule.total_paid < Decimal("12000")


@pytest.mark.parametrize("generator", [generate_price_schedule, generate_sac_schedule])
def test_generators_reject_zero_term(generator):
    with pytest.raises(ZeroTermError) as ei:
        generator(Decimal("100000"), Decimal("0.01"), 0)
    assert ei.value.term_months == 0


def test_negative_term_message():
    with pytest.raises(ZeroTermError, match=r"Total months must be at least one \(got -5\)") as ei:
        generate_sac_schedule(Decimal("100000"), Decimal("0.01"), -5)
    assert ei.value.term_months == -5
    assert "cannot be zero" not in str(ei.value)


def test_trajectory_rejects_zero_term():
    with pytest.raises(ZeroTermError):
        calculate_debt_trajectory(_request(principal="100000", rate="10", term=0))


def test_zero_term_error_is_a_value_error():
    with pytest.raises(ValueError, match="Total months cannot be zero"):
        calculate_debt_trajectory(_request(principal="100000", rate="10", term=0))


def test_trajectory_rejects_rate_domain():
    with pytest.raises(RateDomainError):
        calculate_debt_trajectory(_request(rate="-100"))
