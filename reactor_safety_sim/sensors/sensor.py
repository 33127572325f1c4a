"""Redundant temperature sensor channel with fault injection and Gaussian noise."""

import math
from typing import Optional, Tuple

import numpy as np

from reactor_safety_sim.config.constants import (
    FAULT_BIAS,
    FAULT_DRIFT,
    FAULT_DROPOUT_EVERY,
    FAULT_NONE,
    FAULT_STUCK,
    SENSOR_NOISE_STD,
    SENSOR_VALID_RANGE_C,
)
from reactor_safety_sim.sensors.sensor_fault import SensorFault


class Sensor:
    """One measurement channel.

    Each channel owns its generator and tick counter so that channels are
    independent failure domains. For a fixed seed and call sequence the
    readings are bit-for-bit reproducible.
    """

    def __init__(
        self,
        seed: int,
        noise_std: float = SENSOR_NOISE_STD,
        fault: Optional[SensorFault] = None,
        valid_range: Tuple[float, float] = SENSOR_VALID_RANGE_C,
    ):
        if noise_std < 0:
            raise ValueError(f"noise_std must be >= 0, got {noise_std}")
        if valid_range[0] > valid_range[1]:
            raise ValueError(f"valid_range is inverted: {valid_range}")

        self.seed = seed
        self.noise_std = noise_std
        self.fault = fault or SensorFault.none()
        self.valid_range = valid_range

        self._rng = np.random.default_rng(seed)
        self._tick_count = 0

    @property
    def tick_count(self) -> int:
        return self._tick_count

    def read(self, true_value: float, dt: float) -> float:
        """Return one measurement of true_value for a tick of length dt.

        Dropout ticks return NaN and do not consume noise.
        """
        self._tick_count += 1
        fault = self.fault

        if fault.kind == FAULT_NONE:
            value = true_value
        elif fault.kind == FAULT_STUCK:
            value = fault.value
        elif fault.kind == FAULT_BIAS:
            value = true_value + fault.value
        elif fault.kind == FAULT_DRIFT:
            value = true_value + fault.value * self._tick_count * dt
        elif fault.kind == FAULT_DROPOUT_EVERY:
            if self._tick_count % int(fault.value) == 0:
                return math.nan
            value = true_value
        else:
            raise ValueError(f"Unknown sensor fault kind: {fault.kind!r}")

        if self.noise_std > 0:
            value += self._rng.normal(0.0, self.noise_std)

        return float(value)

    def is_valid(self, value: float) -> bool:
        return in_valid_range(value, self.valid_range)


def in_valid_range(value: float, valid_range: Tuple[float, float]) -> bool:
    """False for NaN, infinities and values outside the inclusive range."""
    if not np.isfinite(value):
        return False
    lo, hi = valid_range
    return lo <= value <= hi
