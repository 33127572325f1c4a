"""Build and run one scenario to a trace."""

import logging
import math
from typing import List, Optional

from reactor_safety_sim.config.schema import (
    ControllerConfig,
    PlantParameters,
    SafetyConfig,
)
from reactor_safety_sim.plant.thermal_model import equilibrium_temperature
from reactor_safety_sim.simulation.closed_loop import ClosedLoopSimulation, TickRecord
from reactor_safety_sim.simulation.scenarios import Scenario

logger = logging.getLogger(__name__)


class ScenarioRunner:
    """Runs scenarios against shared plant and controller settings."""

    def __init__(
        self,
        plant_params: Optional[PlantParameters] = None,
        controller_config: Optional[ControllerConfig] = None,
    ):
        self.plant_params = plant_params or PlantParameters()
        self.controller_config = controller_config or ControllerConfig()

    def build(self, scenario: Scenario, trip_temp: float, seed: int) -> ClosedLoopSimulation:
        sim = ClosedLoopSimulation(
            plant_params=self.plant_params,
            controller_config=self.controller_config,
            safety_config=SafetyConfig(trip_temp_c=trip_temp),
            seed=seed,
        )
        scenario.apply(sim)
        return sim

    def full_power_ceiling(self, scenario: Scenario) -> float:
        """Steady-state temperature at full power with the scenario's weakest coolant."""
        coolant = scenario.coolant
        if scenario.late_coolant is not None:
            coolant = min(coolant, scenario.late_coolant)
        return equilibrium_temperature(self.plant_params, 1.0, coolant)

    def run(
        self,
        scenario: Scenario,
        seconds: float,
        dt_s: float,
        setpoint: float,
        trip_temp: float,
        seed: int,
    ) -> List[TickRecord]:
        """Run a scenario for at most ceil(seconds / dt_s) ticks.

        Returns:
            Tick records; the last one carries the trip if the run tripped.
        """
        if dt_s <= 0:
            raise ValueError(f"dt_s must be > 0, got {dt_s}")

        n_ticks = math.ceil(seconds / dt_s)
        logger.info(
            f"Scenario {scenario.name}: {n_ticks} ticks of {dt_s}s, "
            f"setpoint={setpoint}°C, trip={trip_temp}°C, seed={seed}"
        )
        ceiling = self.full_power_ceiling(scenario)
        if ceiling < trip_temp:
            logger.info(
                f"Full-power steady state {ceiling:.1f}°C is below the trip temperature, "
                f"over-temp cannot latch in this scenario"
            )

        sim = self.build(scenario, trip_temp, seed)
        records = sim.run(
            setpoint, dt_s, n_ticks,
            coolant_schedule=scenario.coolant_schedule(seconds),
        )

        if not sim.tripped:
            logger.info(f"Scenario {scenario.name} completed without trip")
        return records
