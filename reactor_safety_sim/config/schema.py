"""Immutable per-run configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from reactor_safety_sim.config.constants import (
    AMBIENT_TEMP_C,
    K_COOL,
    K_POWER,
    MAX_SENSOR_DELTA_C,
    PID_KD,
    PID_KI,
    PID_KP,
    PID_OUT_MAX,
    PID_OUT_MIN,
    SENSOR_VALID_RANGE_C,
    THERMAL_MASS,
    TRIP_TEMP_C,
)


@dataclass(frozen=True)
class PlantParameters:
    """Lumped thermal model parameters."""

    ambient_c: float = AMBIENT_TEMP_C
    thermal_mass: float = THERMAL_MASS    # divides net heat flow, must be > 0
    k_power: float = K_POWER
    k_cool: float = K_COOL

    def __post_init__(self):
        if not self.thermal_mass > 0:
            raise ValueError(f"thermal_mass must be > 0, got {self.thermal_mass}")
        if self.k_power < 0 or self.k_cool < 0:
            raise ValueError(
                f"Gains must be >= 0, got k_power={self.k_power}, k_cool={self.k_cool}"
            )


@dataclass(frozen=True)
class SafetyConfig:
    """Trip thresholds for the 2-of-3 voting monitor."""

    trip_temp_c: float = TRIP_TEMP_C
    max_sensor_delta_c: float = MAX_SENSOR_DELTA_C
    valid_range_c: Tuple[float, float] = SENSOR_VALID_RANGE_C   # inclusive

    def __post_init__(self):
        lo, hi = self.valid_range_c
        if lo > hi:
            raise ValueError(f"valid_range_c is inverted: {self.valid_range_c}")
        if self.max_sensor_delta_c < 0:
            raise ValueError(
                f"max_sensor_delta_c must be >= 0, got {self.max_sensor_delta_c}"
            )


@dataclass(frozen=True)
class ControllerConfig:
    """PID gains and output bounds."""

    kp: float = PID_KP
    ki: float = PID_KI
    kd: float = PID_KD
    out_min: float = PID_OUT_MIN
    out_max: float = PID_OUT_MAX

    def __post_init__(self):
        if self.out_min > self.out_max:
            raise ValueError(
                f"out_min ({self.out_min}) must be <= out_max ({self.out_max})"
            )
