"""First-order lumped thermal model of the plant.

    dT/dt = (k_power × power − k_cool × coolant × (T − T_ambient)) / thermal_mass

Integrated with explicit (forward) Euler: one derivative evaluation per tick,
no sub-stepping.
"""

import math
from dataclasses import dataclass

from reactor_safety_sim.config.constants import (
    INITIAL_COOLANT,
    INITIAL_POWER,
    INITIAL_TEMP_C,
)
from reactor_safety_sim.config.schema import PlantParameters


@dataclass
class PlantState:
    """Ground-truth plant state, owned by the simulation driver.

    power and coolant are fractions in [0, 1]; callers clamp before assigning.
    """

    temp_c: float = INITIAL_TEMP_C
    power: float = INITIAL_POWER
    coolant: float = INITIAL_COOLANT

    def heat_in(self, params: PlantParameters) -> float:
        return params.k_power * self.power

    def heat_out(self, params: PlantParameters) -> float:
        return params.k_cool * self.coolant * (self.temp_c - params.ambient_c)

    def step(self, params: PlantParameters, dt: float) -> None:
        """Advance the temperature by one Euler step of length dt (seconds)."""
        dtemp = (self.heat_in(params) - self.heat_out(params)) / params.thermal_mass
        self.temp_c += dtemp * dt

        # Degenerate inputs must not poison every following tick
        if math.isnan(self.temp_c):
            self.temp_c = params.ambient_c


def equilibrium_temperature(params: PlantParameters, power: float, coolant: float) -> float:
    """Steady-state temperature for constant power and coolant fractions."""
    heat_in = params.k_power * power
    conductance = params.k_cool * coolant
    if conductance <= 0:
        if heat_in > 0:
            return math.inf
        return params.ambient_c
    return params.ambient_c + heat_in / conductance
