from decimal import Decimal

import pytest

from ems_api.common.errors import InvalidInput
from ems_api.services.deductions import (
    DeductionKind,
    DeductionRule,
    compute_net,
    make_rule,
    rule_amount,
    to_decimal,
)


def _r(kind, value, pct=False, name="x"):
    return DeductionRule(kind=kind, name=name, value=Decimal(str(value)), is_percentage=pct)


def test_percentage_and_fixed_rules():
    out = compute_net(5000, [
        _r(DeductionKind.TAX, 20, pct=True),
        _r(DeductionKind.INSURANCE, 150),
        _r(DeductionKind.CUSTOM, 2, pct=True),
        _r(DeductionKind.CUSTOM, 50),
    ])
    assert out.tax == Decimal("1000")
    assert out.insurance == Decimal("150")
    assert out.other == Decimal("150")
    assert out.net == Decimal("3700")
    assert out.total == Decimal("1300")


def test_last_tax_rule_wins_not_summed():
    out = compute_net(1000, [
        _r(DeductionKind.TAX, 10, pct=True),
        _r(DeductionKind.TAX, 30, pct=True),
    ])
    assert out.tax == Decimal("300")
    assert out.net == Decimal("700")


def test_last_insurance_rule_wins():
    out = compute_net(1000, [_r(DeductionKind.INSURANCE, 200), _r(DeductionKind.INSURANCE, 50)])
    assert out.insurance == Decimal("50")
    assert out.net == Decimal("950")


def test_net_is_floored_at_zero():
    out = compute_net(1000, [_r(DeductionKind.TAX, 900), _r(DeductionKind.CUSTOM, 500)])
    assert out.net == Decimal("0")


@pytest.mark.parametrize("gross,rules", [
    (1, []),
    (100, [_r(DeductionKind.CUSTOM, 100, pct=True)]),
    (2500, [_r(DeductionKind.TAX, 45, pct=True), _r(DeductionKind.INSURANCE, 60, pct=True)]),
    (12000.5, [_r(DeductionKind.CUSTOM, 10000), _r(DeductionKind.CUSTOM, 3000)]),
])
def test_net_matches_formula_and_is_never_negative(gross, rules):
    out = compute_net(gross, rules)
    g = Decimal(str(gross))
    assert out.net == max(Decimal("0"), g - out.tax - out.insurance - out.other)
    assert out.net >= 0


def test_no_rules_net_equals_gross():
    out = compute_net(Decimal("4200.50"), [])
    assert (out.tax, out.insurance, out.other) == (0, 0, 0)
    assert out.net == Decimal("4200.50")


def test_rule_amount():
    assert rule_amount(_r(DeductionKind.TAX, 12.5, pct=True), 2000) == Decimal("250")
    assert rule_amount(_r(DeductionKind.CUSTOM, 75), 2000) == Decimal("75")


def test_make_rule_from_payload():
    r = make_rule({"type": "tax", "name": "Income Tax", "value": 20, "is_percentage": True})
    assert r.kind is DeductionKind.TAX
    assert r.value == Decimal("20")
    assert r.is_percentage is True


@pytest.mark.parametrize("payload", [
    {"type": "TAX", "name": "Income Tax", "value": 0},
    {"type": "TAX", "name": "Income Tax", "value": -5},
    {"type": "BONUS", "name": "x", "value": 5},
    {"type": "CUSTOM", "name": "", "value": 5},
    {"type": "CUSTOM", "name": "x", "value": "abc"},
    {"type": "CUSTOM", "name": "x", "value": "NaN"},
    {"type": "TAX", "name": "x", "value": "Infinity", "is_percentage": True},
])
def test_make_rule_rejects_bad_payloads(payload):
    with pytest.raises(InvalidInput):
        make_rule(payload)


@pytest.mark.parametrize("raw", ["NaN", "sNaN", "Infinity", "-Infinity", Decimal("NaN"), float("inf")])
def test_non_finite_amounts_are_rejected(raw):
    with pytest.raises(InvalidInput):
        to_decimal(raw, "Gross salary")


def test_to_decimal_accepts_plain_numbers():
    assert to_decimal("12.50") == Decimal("12.50")
    assert to_decimal(7) == Decimal("7")
    assert to_decimal(Decimal("3.1")) == Decimal("3.1")
