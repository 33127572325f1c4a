"""Sensor fault variants.

A fault is a tag plus an optional payload:
    none: truth passes through
    stuck(value): reading jammed at value
    bias(offset): truth + offset
    drift(per_s): truth + per_s × ticks × dt
    dropout_every(n): NaN on every n-th tick (1-indexed), truth otherwise
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from reactor_safety_sim.config.constants import (
    FAULT_BIAS,
    FAULT_DRIFT,
    FAULT_DROPOUT_EVERY,
    FAULT_KINDS,
    FAULT_NONE,
    FAULT_STUCK,
)


@dataclass(frozen=True)
class SensorFault:
    kind: str = FAULT_NONE
    value: float = 0.0

    def __post_init__(self):
        if self.kind not in FAULT_KINDS:
            raise ValueError(f"Unknown sensor fault kind: {self.kind!r}")
        if self.kind == FAULT_DROPOUT_EVERY:
            if not math.isfinite(self.value) or int(self.value) != self.value or self.value <= 0:
                raise ValueError(f"dropout_every needs an integer n > 0, got {self.value}")

    @classmethod
    def none(cls) -> SensorFault:
        return cls(FAULT_NONE)

    @classmethod
    def stuck(cls, value: float) -> SensorFault:
        return cls(FAULT_STUCK, value)

    @classmethod
    def bias(cls, offset: float) -> SensorFault:
        return cls(FAULT_BIAS, offset)

    @classmethod
    def drift(cls, per_s: float) -> SensorFault:
        return cls(FAULT_DRIFT, per_s)

    @classmethod
    def dropout_every(cls, n: int) -> SensorFault:
        return cls(FAULT_DROPOUT_EVERY, n)

    def describe(self) -> str:
        if self.kind == FAULT_NONE:
            return FAULT_NONE
        if self.kind == FAULT_DROPOUT_EVERY:
            return f"{self.kind}({int(self.value)})"
        return f"{self.kind}({self.value:g})"
