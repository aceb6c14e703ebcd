"""Business rule engine - payment-mode amount bounds and the NEFT cutoff hold"""

from dataclasses import dataclass
from datetime import datetime, time
from decimal import Decimal
from typing import Dict, Optional, Type

from corppay_gateway.domain.exceptions import (
    AmountOutOfBandForModeError,
    AmountTooHighForModeError,
    AmountTooLowForModeError,
    CutoffExceededHold,
    InvalidModeError,
    RuleError,
)
from corppay_gateway.utils.time_utils import is_at_or_after

DEFAULT_HIGH_VALUE_THRESHOLD = Decimal("200000")
DEFAULT_NEFT_MIN = Decimal("1000")
DEFAULT_NEFT_MAX = Decimal("500000")
DEFAULT_NEFT_CUTOFF = time(17, 0)


@dataclass(frozen=True)
class ModeRule:
    """
    Amount window for one payment mode.

    `minimum` is inclusive. `maximum` is inclusive unless `maximum_exclusive`
    is set. `cutoff` is the IST wall-clock time from which requests are held.
    """

    minimum: Optional[Decimal] = None
    maximum: Optional[Decimal] = None
    maximum_exclusive: bool = False
    violation: Type[RuleError] = RuleError
    message: str = ""
    cutoff: Optional[time] = None

    def allows(self, amount: Decimal) -> bool:
        if self.minimum is not None and amount < self.minimum:
            return False
        if self.maximum is not None:
            if self.maximum_exclusive and amount >= self.maximum:
                return False
            if not self.maximum_exclusive and amount > self.maximum:
                return False
        return True


def build_mode_rules(
    high_value_threshold: Decimal = DEFAULT_HIGH_VALUE_THRESHOLD,
    neft_min: Decimal = DEFAULT_NEFT_MIN,
    neft_max: Decimal = DEFAULT_NEFT_MAX,
    neft_cutoff: time = DEFAULT_NEFT_CUTOFF,
) -> Dict[str, ModeRule]:
    """
    Rule table keyed by Mode_of_Pay.

    Limits follow the settlement rails:
    - FT, IMPS: low-value rails, amount strictly below the high-value threshold
    - RTGS:     high-value rail, amount at or above the threshold
    - NEFT:     fixed band, and requests from the daily cutoff onwards are held
    """
    low_value = ModeRule(
        maximum=high_value_threshold,
        maximum_exclusive=True,
        violation=AmountTooHighForModeError,
        message=f"For FT and IMPS, Amount must be < Rs {high_value_threshold}.",
    )
    return {
        "FT": low_value,
        "IMPS": low_value,
        "RTGS": ModeRule(
            minimum=high_value_threshold,
            violation=AmountTooLowForModeError,
            message=f"For RTGS, Amount must be >= Rs {high_value_threshold}.",
        ),
        "NEFT": ModeRule(
            minimum=neft_min,
            maximum=neft_max,
            violation=AmountOutOfBandForModeError,
            message=f"For NEFT, Amount must be between Rs {neft_min} and Rs {neft_max}.",
            cutoff=neft_cutoff,
        ),
    }


class BusinessRuleEngine:
    """Stateless evaluation of the mode rule table"""

    def __init__(self, rules: Optional[Dict[str, ModeRule]] = None):
        self.rules = rules if rules is not None else build_mode_rules()

    def evaluate(self, mode: str, amount: Decimal, now: datetime) -> None:
        """
        Apply the amount bound for `mode`, then its cutoff.

        Raises:
            AmountTooHighForModeError / AmountTooLowForModeError /
            AmountOutOfBandForModeError: amount outside the mode's window
            InvalidModeError: no rule exists for mode
            CutoffExceededHold: valid request received at or after the cutoff
        """
        rule = self.rules.get(mode)
        if rule is None:
            raise InvalidModeError("Invalid or missing Mode_of_Pay.", f"No rule configured for {mode}")

        if not rule.allows(amount):
            raise rule.violation(rule.message, f"Amount {amount} not permitted for {mode}")

        if rule.cutoff is not None and is_at_or_after(now, rule.cutoff):
            raise CutoffExceededHold(
                "Transaction on hold as cutoff time exceeded. Will be processed on the next working day.",
                f"{mode} cutoff is {rule.cutoff.strftime('%H:%M')} IST",
            )
