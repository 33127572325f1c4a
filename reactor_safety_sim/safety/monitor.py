"""2-of-3 voting safety monitor with a latching trip (SCRAM).

Two states: armed and tripped. Tripped is terminal for the run. Checks run
in strict order, and the first failing one latches its reason:

    1. validity       fewer than 2 valid channels       -> sensor-invalid
    2. disagreement   spread of valid readings > delta  -> sensor-disagree
    3. over-temp      >= 2 channels at/above trip temp  -> over-temp
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from reactor_safety_sim.config.constants import (
    STATUS_ARMED,
    STATUS_TRIPPED,
    TRIP_OVER_TEMP,
    TRIP_REASONS,
    TRIP_SENSOR_DISAGREE,
    TRIP_SENSOR_INVALID,
)
from reactor_safety_sim.config.schema import SafetyConfig
from reactor_safety_sim.sensors.sensor import in_valid_range

logger = logging.getLogger(__name__)


@dataclass
class SafetyState:
    status: str = STATUS_ARMED
    reason: Optional[str] = None

    @property
    def scram(self) -> bool:
        return self.status == STATUS_TRIPPED

    def latch(self, reason: str) -> bool:
        """Transition armed -> tripped. Returns False if already tripped."""
        if self.status == STATUS_TRIPPED:
            return False
        if reason not in TRIP_REASONS:
            raise ValueError(f"Unknown trip reason: {reason!r}")
        self.status = STATUS_TRIPPED
        self.reason = reason
        return True


def is_valid_reading(config: SafetyConfig, value: float) -> bool:
    return in_valid_range(value, config.valid_range_c)


def two_out_of_three(flags: Iterable[bool]) -> bool:
    return sum(1 for f in flags if f) >= 2


def evaluate(config: SafetyConfig, state: SafetyState, readings: Sequence[float]) -> bool:
    """Evaluate three redundant readings and latch a trip if warranted.

    Args:
        config: Trip thresholds.
        state: Safety state, mutated only here.
        readings: Exactly three channel readings (NaN allowed).

    Returns:
        The trip flag after evaluation.
    """
    if state.scram:
        return True

    if len(readings) != 3:
        raise ValueError(f"Expected 3 sensor readings, got {len(readings)}")

    valids = [is_valid_reading(config, v) for v in readings]
    if not two_out_of_three(valids):
        _trip(state, TRIP_SENSOR_INVALID, readings)
        return True

    valid_values: List[float] = [v for v, ok in zip(readings, valids) if ok]
    spread = max(valid_values) - min(valid_values)
    if spread > config.max_sensor_delta_c:
        _trip(state, TRIP_SENSOR_DISAGREE, readings)
        return True

    over = [ok and v >= config.trip_temp_c for v, ok in zip(readings, valids)]
    if two_out_of_three(over):
        _trip(state, TRIP_OVER_TEMP, readings)
        return True

    return False


def _trip(state: SafetyState, reason: str, readings: Sequence[float]) -> None:
    state.latch(reason)
    formatted = ", ".join(f"{v:.2f}" for v in readings)
    logger.warning(f"SCRAM latched: {reason} (readings: {formatted})")


class SafetyMonitor:
    """Owns the safety state for one run."""

    def __init__(self, config: Optional[SafetyConfig] = None):
        self.config = config or SafetyConfig()
        self.state = SafetyState()

    @property
    def scram(self) -> bool:
        return self.state.scram

    @property
    def reason(self) -> Optional[str]:
        return self.state.reason

    def evaluate(self, readings: Sequence[float]) -> bool:
        return evaluate(self.config, self.state, readings)
