"""PID controller with output saturation and decay-based anti-windup."""

from dataclasses import dataclass
from typing import Optional

from reactor_safety_sim.config.constants import ANTI_WINDUP_DECAY
from reactor_safety_sim.config.schema import ControllerConfig


@dataclass
class ControllerState:
    integral: float = 0.0
    prev_error: Optional[float] = None   # None until the first update


class PidController:
    """Maps a setpoint and a measurement to a command in [out_min, out_max].

    Anti-windup is a plain decay: while the output is clamped at a bound and
    the error still pushes toward that bound, the integral is multiplied by
    ANTI_WINDUP_DECAY. Order per update: accumulate integral, compute output,
    clamp, conditionally decay.
    """

    def __init__(self, config: Optional[ControllerConfig] = None):
        self.config = config or ControllerConfig()
        self.state = ControllerState()

    @property
    def integral(self) -> float:
        return self.state.integral

    @property
    def prev_error(self) -> Optional[float]:
        return self.state.prev_error

    def reset(self) -> None:
        """Clear integral and derivative memory, keep the configuration."""
        self.state = ControllerState()

    def update(self, setpoint: float, measurement: float, dt: float) -> float:
        if dt < 0:
            raise ValueError(f"dt must be >= 0, got {dt}")

        cfg = self.config
        state = self.state
        error = setpoint - measurement

        state.integral += error * dt

        if state.prev_error is not None and dt > 0:
            derivative = (error - state.prev_error) / dt
        else:
            derivative = 0.0
        state.prev_error = error

        out = cfg.kp * error + cfg.ki * state.integral + cfg.kd * derivative

        if out > cfg.out_max:
            out = cfg.out_max
            if error > 0:
                state.integral *= ANTI_WINDUP_DECAY
        elif out < cfg.out_min:
            out = cfg.out_min
            if error < 0:
                state.integral *= ANTI_WINDUP_DECAY

        return out
