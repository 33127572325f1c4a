"""Named demo scenarios: initial coolant, injected faults, coolant schedule."""

from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from reactor_safety_sim.config.constants import (
    CHANNELS,
    LOSS_OF_COOLING_COOLANT,
    LOSS_OF_COOLING_FRACTION,
    SCENARIO_COOLANT,
    SCENARIO_LOSS_OF_COOLING,
    SCENARIO_NOISE_STD,
    SCENARIO_NORMAL,
    SCENARIO_OVERHEAT,
    SCENARIO_SENSOR_DISAGREE,
    SCENARIOS,
    SENSOR_DISAGREE_BIAS_C,
)
from reactor_safety_sim.sensors.sensor_fault import SensorFault
from reactor_safety_sim.simulation.closed_loop import ClosedLoopSimulation


@dataclass(frozen=True)
class Scenario:
    name: str
    coolant: float
    noise_std: float = SCENARIO_NOISE_STD
    faults: Dict[str, SensorFault] = field(default_factory=dict)
    # Coolant drops to late_coolant once t_s exceeds late_fraction of the run
    late_coolant: Optional[float] = None
    late_fraction: float = LOSS_OF_COOLING_FRACTION

    def apply(self, sim: ClosedLoopSimulation) -> None:
        """Configure a freshly built simulation before its first tick."""
        sim.set_coolant(self.coolant)
        for channel in CHANNELS:
            sim.inject_fault(channel, self.faults.get(channel, SensorFault.none()))
            sim.set_noise_std(channel, self.noise_std)

    def coolant_schedule(self, duration_s: float) -> Optional[Callable[[float], Optional[float]]]:
        if self.late_coolant is None:
            return None
        threshold = duration_s * self.late_fraction
        late_coolant = self.late_coolant

        def schedule(t_s: float) -> Optional[float]:
            return late_coolant if t_s > threshold else None

        return schedule


def get_scenario(name: str) -> Scenario:
    if name == SCENARIO_NORMAL:
        return Scenario(name, SCENARIO_COOLANT[name])
    if name == SCENARIO_OVERHEAT:
        return Scenario(name, SCENARIO_COOLANT[name])
    if name == SCENARIO_LOSS_OF_COOLING:
        return Scenario(
            name, SCENARIO_COOLANT[name], late_coolant=LOSS_OF_COOLING_COOLANT,
        )
    if name == SCENARIO_SENSOR_DISAGREE:
        return Scenario(
            name, SCENARIO_COOLANT[name],
            faults={"s2": SensorFault.bias(SENSOR_DISAGREE_BIAS_C)},
        )
    raise ValueError(f"Unknown scenario {name!r}, expected one of {SCENARIOS}")
