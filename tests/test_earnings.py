from shiftpay.earnings import EarningLine, compute_hourly_earnings, compute_net_salary, earning_lines
from shiftpay.models import LineItem, RateSource, ResolvedRate


def test_hourly_earnings_with_overtime():
    assert compute_hourly_earnings(38, 6, 20, 1.5) == 940.0


def test_resolved_rate_is_accepted():
    assert compute_hourly_earnings(8, 0, ResolvedRate(rate=17.5, source=RateSource.PROFILE)) == 140.0


def test_no_rate_earns_nothing():
    assert compute_hourly_earnings(40, 5, None) == 0.0
    assert earning_lines(40, 5, None) == []


def test_earnings_round_to_cents():
    assert compute_hourly_earnings(1.333, 0, 33.333) == 44.43


def test_earning_line_amount_rounds_currency():
    line = EarningLine("overtime", hours=1.5, rate=33.333, multiplier=1.5)

    assert line.amount == 75.0


def test_net_salary_adds_bonuses_and_subtracts_deductions():
    bonuses = [LineItem("performance", 200), LineItem("referral", 50)]
    deductions = [LineItem("advance", 100)]

    assert compute_net_salary(5000, bonuses, deductions) == 5150.0


def test_negative_amounts_are_plain_arithmetic():
    assert compute_net_salary(1000, [LineItem("correction", -50)], []) == 950.0
