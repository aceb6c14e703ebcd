"""Unit tests for payment-mode rules and the NEFT cutoff"""

from datetime import datetime, time, timezone
from decimal import Decimal

import pytest

from corppay_gateway.domain.exceptions import (
    AmountOutOfBandForModeError,
    AmountTooHighForModeError,
    AmountTooLowForModeError,
    CutoffExceededHold,
    InvalidModeError,
)
from corppay_gateway.domain.rules import BusinessRuleEngine, build_mode_rules
from corppay_gateway.utils.time_utils import IST

MORNING = datetime(2026, 3, 2, 10, 0, tzinfo=IST)


@pytest.fixture
def engine() -> BusinessRuleEngine:
    return BusinessRuleEngine()


class TestAmountBounds:
    @pytest.mark.parametrize("mode", ["FT", "IMPS"])
    def test_low_value_rails_below_threshold(self, engine, mode):
        engine.evaluate(mode, Decimal("199999.99"), MORNING)

    @pytest.mark.parametrize("mode", ["FT", "IMPS"])
    def test_low_value_rails_reject_threshold(self, engine, mode):
        """Threshold itself is not allowed for FT and IMPS"""
        with pytest.raises(AmountTooHighForModeError) as exc_info:
            engine.evaluate(mode, Decimal("200000"), MORNING)
        assert exc_info.value.error_code.value == "ER012"

    def test_rtgs_accepts_threshold(self, engine):
        engine.evaluate("RTGS", Decimal("200000"), MORNING)

    def test_rtgs_rejects_below_threshold(self, engine):
        with pytest.raises(AmountTooLowForModeError):
            engine.evaluate("RTGS", Decimal("199999.99"), MORNING)

    @pytest.mark.parametrize("amount", ["1000", "250000", "500000"])
    def test_neft_band_inclusive(self, engine, amount):
        engine.evaluate("NEFT", Decimal(amount), MORNING)

    @pytest.mark.parametrize("amount", ["999.99", "500000.01"])
    def test_neft_outside_band(self, engine, amount):
        with pytest.raises(AmountOutOfBandForModeError):
            engine.evaluate("NEFT", Decimal(amount), MORNING)

    def test_mode_without_rule_is_rejected(self, engine):
        with pytest.raises(InvalidModeError):
            engine.evaluate("UPI", Decimal("1"), MORNING)


class TestCutoff:
    def test_just_before_cutoff(self, engine):
        engine.evaluate("NEFT", Decimal("5000"), datetime(2026, 3, 2, 16, 59, 59, tzinfo=IST))

    def test_at_cutoff_is_held(self, engine):
        with pytest.raises(CutoffExceededHold) as exc_info:
            engine.evaluate("NEFT", Decimal("5000"), datetime(2026, 3, 2, 17, 0, tzinfo=IST))
        assert exc_info.value.error_code.value == "ER101"

    def test_out_of_band_after_cutoff_fails_not_held(self, engine):
        """Bound is checked before the cutoff"""
        with pytest.raises(AmountOutOfBandForModeError):
            engine.evaluate("NEFT", Decimal("10"), datetime(2026, 3, 2, 18, 0, tzinfo=IST))

    def test_cutoff_only_applies_to_neft(self, engine):
        engine.evaluate("FT", Decimal("5000"), datetime(2026, 3, 2, 22, 0, tzinfo=IST))

    def test_cutoff_compared_in_ist(self, engine):
        """11:30 UTC is 17:00 IST"""
        with pytest.raises(CutoffExceededHold):
            engine.evaluate("NEFT", Decimal("5000"), datetime(2026, 3, 2, 11, 30, tzinfo=timezone.utc))
        engine.evaluate("NEFT", Decimal("5000"), datetime(2026, 3, 2, 11, 29, tzinfo=timezone.utc))

    def test_naive_datetime_is_utc(self, engine):
        with pytest.raises(CutoffExceededHold):
            engine.evaluate("NEFT", Decimal("5000"), datetime(2026, 3, 2, 12, 0))


def test_custom_rule_table():
    rules = build_mode_rules(
        high_value_threshold=Decimal("100000"),
        neft_min=Decimal("1"),
        neft_max=Decimal("10"),
        neft_cutoff=time(9, 0),
    )
    engine = BusinessRuleEngine(rules)

    with pytest.raises(AmountTooHighForModeError):
        engine.evaluate("FT", Decimal("100000"), MORNING)
    engine.evaluate("RTGS", Decimal("100000"), MORNING)
    with pytest.raises(CutoffExceededHold):
        engine.evaluate("NEFT", Decimal("5"), MORNING)
