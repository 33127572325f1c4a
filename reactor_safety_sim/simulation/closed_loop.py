"""Closed control loop: sensors -> safety vote -> PID -> plant, once per tick."""

import logging
from dataclasses import asdict, dataclass
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np

from reactor_safety_sim.config.constants import CHANNEL_SEED_MASKS, CHANNELS
from reactor_safety_sim.config.schema import ControllerConfig, PlantParameters, SafetyConfig
from reactor_safety_sim.control.pid import PidController
from reactor_safety_sim.plant.thermal_model import PlantState
from reactor_safety_sim.safety.monitor import SafetyMonitor
from reactor_safety_sim.sensors.sensor import Sensor
from reactor_safety_sim.sensors.sensor_fault import SensorFault

logger = logging.getLogger(__name__)


class SimulationTripped(RuntimeError):
    """Raised when a tick is requested after the safety trip has latched."""


@dataclass
class TickRecord:
    """Values emitted for one tick (one trace row)."""

    t_s: float
    true_temp_c: float    # after the plant step
    s1_c: float
    s2_c: float
    s3_c: float
    power: float          # actuation applied during the step
    coolant: float
    scram: bool
    reason: Optional[str]

    def to_dict(self) -> Dict:
        return asdict(self)


def fuse_measurements(readings: Sequence[float], fallback: float) -> float:
    """Mean of the finite readings, or fallback if none is finite."""
    finite = [v for v in readings if np.isfinite(v)]
    if not finite:
        return fallback
    return sum(finite) / len(finite)


class ClosedLoopSimulation:
    """Owns every mutable piece of one run: plant, three sensors, PID, monitor."""

    def __init__(
        self,
        plant_params: Optional[PlantParameters] = None,
        controller_config: Optional[ControllerConfig] = None,
        safety_config: Optional[SafetyConfig] = None,
        seed: int = 0,
        initial_state: Optional[PlantState] = None,
    ):
        if seed < 0:
            raise ValueError(f"seed must be >= 0, got {seed}")
        self.plant_params = plant_params or PlantParameters()
        self.plant = initial_state or PlantState()
        self.controller = PidController(controller_config)
        self.monitor = SafetyMonitor(safety_config)
        self.sensors: Dict[str, Sensor] = {
            name: Sensor(seed ^ CHANNEL_SEED_MASKS[name]) for name in CHANNELS
        }
        self.tick_index = 0

    # ------------------------------------------------------------------
    # Scenario configuration (before the run starts)
    # ------------------------------------------------------------------

    def set_coolant(self, fraction: float) -> None:
        self.plant.coolant = fraction

    def inject_fault(self, channel: str, fault: SensorFault) -> None:
        self._sensor(channel).fault = fault
        logger.debug(f"Channel {channel}: fault {fault.describe()}")

    def set_noise_std(self, channel: str, noise_std: float) -> None:
        if noise_std < 0:
            raise ValueError(f"noise_std must be >= 0, got {noise_std}")
        self._sensor(channel).noise_std = noise_std

    def _sensor(self, channel: str) -> Sensor:
        if channel not in self.sensors:
            raise KeyError(f"Unknown sensor channel {channel!r}, expected one of {CHANNELS}")
        return self.sensors[channel]

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    @property
    def tripped(self) -> bool:
        return self.monitor.scram

    def tick(self, setpoint: float, dt: float) -> TickRecord:
        """Advance one tick and return its record.

        Sequence: read three sensors at the current true temperature, vote,
        compute actuation (forced to 0 once tripped), integrate the plant.
        """
        if self.tripped:
            raise SimulationTripped(
                f"Run already tripped ({self.monitor.reason}) at tick {self.tick_index}"
            )

        true_temp = self.plant.temp_c
        readings = [self.sensors[name].read(true_temp, dt) for name in CHANNELS]

        self.monitor.evaluate(readings)

        if self.monitor.scram:
            self.plant.power = 0.0
        else:
            measurement = fuse_measurements(readings, fallback=true_temp)
            command = self.controller.update(setpoint, measurement, dt)
            self.plant.power = float(np.clip(command, 0.0, 1.0))

        self.plant.step(self.plant_params, dt)

        record = TickRecord(
            t_s=self.tick_index * dt,
            true_temp_c=self.plant.temp_c,
            s1_c=readings[0],
            s2_c=readings[1],
            s3_c=readings[2],
            power=self.plant.power,
            coolant=self.plant.coolant,
            scram=self.monitor.scram,
            reason=self.monitor.reason,
        )
        self.tick_index += 1
        return record

    def run(
        self,
        setpoint: float,
        dt: float,
        n_ticks: int,
        coolant_schedule: Optional[Callable[[float], Optional[float]]] = None,
    ) -> List[TickRecord]:
        """Run up to n_ticks, stopping after the tick that latches the trip.

        Args:
            setpoint: Control setpoint (°C).
            dt: Tick duration (s).
            n_ticks: Maximum number of ticks.
            coolant_schedule: Optional f(t_s) returning a coolant fraction to
                apply before that tick, or None to leave coolant unchanged.
        """
        records: List[TickRecord] = []
        for _ in range(n_ticks):
            if coolant_schedule is not None:
                coolant = coolant_schedule(self.tick_index * dt)
                if coolant is not None:
                    self.plant.coolant = coolant

            record = self.tick(setpoint, dt)
            records.append(record)

            if record.scram:
                logger.info(
                    f"Run stopped at t={record.t_s:.2f}s "
                    f"(true temp {record.true_temp_c:.1f}°C, reason {record.reason})"
                )
                break

        return records
