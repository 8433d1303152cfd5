# ems_api/services/deductions.py
"""
Gross → net salary arithmetic.

Pure functions only: no session, no models. The salary model calls
`compute_net` every time its gross or deduction list changes.

Rules per kind:
  - TAX       : last TAX rule in the list wins (amounts are not summed)
  - INSURANCE : last INSURANCE rule wins
  - CUSTOM    : all CUSTOM amounts are summed into `other`

A rule's effective amount is `gross * value / 100` for percentage rules and
`value` otherwise. Net is floored at zero; a negative result is not an error.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Iterable, Protocol

from ems_api.common.errors import InvalidInput

ZERO = Decimal("0")
HUNDRED = Decimal("100")


class DeductionKind(enum.Enum):
    TAX = "TAX"
    INSURANCE = "INSURANCE"
    CUSTOM = "CUSTOM"

    @classmethod
    def parse(cls, raw):
        if isinstance(raw, cls):
            return raw
        s = (str(raw) if raw is not None else "").strip().upper()
        try:
            return cls[s]
        except KeyError:
            raise InvalidInput(f"Unknown deduction type: {raw!r}")


class RuleLike(Protocol):
    kind: DeductionKind
    value: Decimal
    is_percentage: bool


@dataclass(frozen=True)
class DeductionRule:
    kind: DeductionKind
    name: str
    value: Decimal
    is_percentage: bool = False


@dataclass(frozen=True)
class DeductionBreakdown:
    tax: Decimal
    insurance: Decimal
    other: Decimal
    net: Decimal

    @property
    def total(self) -> Decimal:
        return self.tax + self.insurance + self.other


def to_decimal(x, field="amount") -> Decimal:
    if x is None or x == "" or isinstance(x, bool):
        raise InvalidInput(f"{field} is required")
    if isinstance(x, Decimal):
        d = x
    else:
        try:
            d = Decimal(str(x))
        except (InvalidOperation, ValueError):
            raise InvalidInput(f"{field} must be a number")
    # NaN / Infinity parse fine but cannot be compared or stored
    if not d.is_finite():
        raise InvalidInput(f"{field} must be a number")
    return d


def make_rule(data: dict) -> DeductionRule:
    """Build a rule from a JSON-ish dict: {type|kind, name, value, is_percentage}."""
    if not isinstance(data, dict):
        raise InvalidInput("Each deduction must be an object")
    kind = DeductionKind.parse(data.get("type", data.get("kind")))
    name = (data.get("name") or "").strip()
    if not name:
        raise InvalidInput("Deduction name is required")
    value = to_decimal(data.get("value"), "Deduction value")
    if value <= ZERO:
        raise InvalidInput("Deduction value must be greater than 0")
    pct = data.get("is_percentage", data.get("percentage", False))
    return DeductionRule(kind=kind, name=name, value=value, is_percentage=bool(pct))


def rule_amount(rule: RuleLike, gross) -> Decimal:
    gross = to_decimal(gross, "gross")
    value = to_decimal(rule.value, "Deduction value")
    if rule.is_percentage:
        return gross * value / HUNDRED
    return value


def compute_net(gross, rules: Iterable[RuleLike]) -> DeductionBreakdown:
    gross = to_decimal(gross, "gross")
    tax = insurance = other = ZERO

    for rule in rules:
        amount = rule_amount(rule, gross)
        kind = DeductionKind.parse(rule.kind)
        if kind is DeductionKind.TAX:
            tax = amount
        elif kind is DeductionKind.INSURANCE:
            insurance = amount
        elif kind is DeductionKind.CUSTOM:
            other += amount
        else:  # pragma: no cover - enum is closed
            raise InvalidInput(f"Unhandled deduction type: {kind}")

    net = gross - tax - insurance - other
    if net < ZERO:
        net = ZERO
    return DeductionBreakdown(tax=tax, insurance=insurance, other=other, net=net)
