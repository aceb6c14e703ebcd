"""Settlement pipeline stages and the transitions allowed between them"""

RECEIVED = "RECEIVED"
AUTHENTICATED = "AUTHENTICATED"
SCHEMA_VALID = "SCHEMA_VALID"
RULE_VALID = "RULE_VALID"
CLAIMED = "CLAIMED"
DEBITED = "DEBITED"
RESPONDED = "RESPONDED"
FAILED = "FAILED"
HELD = "HELD"

ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    RECEIVED: {AUTHENTICATED, FAILED},
    AUTHENTICATED: {SCHEMA_VALID, FAILED},
    SCHEMA_VALID: {RULE_VALID, FAILED},
    # HELD is only reachable once the amount rules have passed
    RULE_VALID: {CLAIMED, HELD, FAILED},
    CLAIMED: {DEBITED, FAILED},
    DEBITED: {RESPONDED, FAILED},
    RESPONDED: set(),
    FAILED: set(),
    HELD: set(),
}

TERMINAL_STAGES = frozenset({RESPONDED, FAILED, HELD})


def validate_transition(current: str, new: str) -> None:
    """Raise when a transition is not allowed by the state machine."""

    if new not in ALLOWED_TRANSITIONS.get(current, set()):
        raise ValueError(f"Invalid transition: {current} -> {new}")


class PipelineRun:
    """Tracks the stage of a single request as it moves through the pipeline"""

    def __init__(self) -> None:
        self.stage = RECEIVED
        self.history = [RECEIVED]

    def advance(self, new: str) -> None:
        validate_transition(self.stage, new)
        self.stage = new
        self.history.append(new)

    def fail(self) -> str:
        """Move to FAILED and return the stage the failure happened at"""
        failed_at = self.stage
        self.advance(FAILED)
        return failed_at

    @property
    def finished(self) -> bool:
        return self.stage in TERMINAL_STAGES
