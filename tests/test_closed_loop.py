"""Closed-loop tests: plant + sensors + PID + safety monitor, end to end."""

import math

import pytest

from reactor_safety_sim.config.schema import ControllerConfig, PlantParameters, SafetyConfig
from reactor_safety_sim.plant.thermal_model import PlantState
from reactor_safety_sim.safety.monitor import SafetyState, evaluate
from reactor_safety_sim.sensors.sensor import Sensor
from reactor_safety_sim.sensors.sensor_fault import SensorFault
from reactor_safety_sim.simulation.closed_loop import (
    ClosedLoopSimulation,
    SimulationTripped,
    fuse_measurements,
)

# Light enough to reach 420 °C from 300 °C within 400 ticks of 0.05 s at full power
FAST_PLANT = PlantParameters(thermal_mass=10.0)


class TestFuseMeasurements:
    def test_mean_of_finite(self):
        assert fuse_measurements([300.0, 302.0, float("nan")], fallback=0.0) == 301.0

    def test_fallback_when_nothing_finite(self):
        nan = float("nan")
        assert fuse_measurements([nan, nan, float("inf")], fallback=123.0) == 123.0


class TestOverTemperature:
    def test_forced_power_trips_over_temp(self):
        """300 °C, coolant 0.15, power 1.0, trip 420 °C, 400 ticks of 0.05 s."""
        dt = 0.05
        plant = PlantState(temp_c=300.0, power=1.0, coolant=0.15)
        config = SafetyConfig(trip_temp_c=420.0)
        state = SafetyState()
        sensors = [Sensor(seed=1), Sensor(seed=2), Sensor(seed=3)]

        trip_temp = None
        for _ in range(400):
            readings = [s.read(plant.temp_c, dt) for s in sensors]
            evaluate(config, state, readings)
            if state.scram:
                trip_temp = plant.temp_c
                break
            plant.step(FAST_PLANT, dt)

        assert state.scram, "Expected SCRAM to be triggered"
        assert state.reason == "over-temp"
        # Noise sigma is 0.25, so truth at trip sits within a few sigma of the threshold
        assert trip_temp >= 420.0 - 1.5

    def test_closed_loop_trips_and_stops(self):
        sim = ClosedLoopSimulation(
            plant_params=FAST_PLANT,
            safety_config=SafetyConfig(trip_temp_c=420.0),
            seed=7,
            initial_state=PlantState(temp_c=300.0, coolant=0.15),
        )
        # Setpoint far above the trip keeps the controller saturated at full power
        records = sim.run(setpoint=1000.0, dt=0.05, n_ticks=400)

        assert len(records) < 400
        assert all(not r.scram for r in records[:-1])
        last = records[-1]
        assert last.scram
        assert last.reason == "over-temp"
        assert last.power == 0.0
        assert all(r.power == 1.0 for r in records[:-1])

    def test_tick_after_trip_raises(self):
        sim = ClosedLoopSimulation(seed=3)
        sim.inject_fault("s1", SensorFault.dropout_every(1))
        sim.inject_fault("s2", SensorFault.dropout_every(1))
        record = sim.tick(350.0, 0.05)
        assert record.reason == "sensor-invalid"
        with pytest.raises(SimulationTripped):
            sim.tick(350.0, 0.05)


class TestDropoutScenario:
    def test_single_dropout_channel_does_not_trip(self):
        """Two valid channels remain a majority."""
        sim = ClosedLoopSimulation(seed=11)
        sim.set_coolant(0.6)
        sim.inject_fault("s1", SensorFault.dropout_every(1))

        records = sim.run(setpoint=350.0, dt=0.05, n_ticks=400)

        assert len(records) == 400
        assert not sim.tripped
        assert all(math.isnan(r.s1_c) for r in records)
        assert all(not math.isnan(r.s2_c) for r in records)

    def test_dropout_plus_bias_trips_on_disagreement(self):
        sim = ClosedLoopSimulation(seed=11)
        sim.set_coolant(0.6)
        sim.inject_fault("s1", SensorFault.dropout_every(1))
        sim.inject_fault("s2", SensorFault.bias(25.0))

        records = sim.run(setpoint=350.0, dt=0.05, n_ticks=400)

        assert len(records) == 1
        assert records[0].scram
        assert records[0].reason == "sensor-disagree"


class TestDeterminism:
    def _run(self, seed):
        sim = ClosedLoopSimulation(
            controller_config=ControllerConfig(kp=0.05, ki=0.01, kd=0.01),
            seed=seed,
        )
        sim.set_coolant(0.2)
        sim.inject_fault("s3", SensorFault.drift(0.1))
        return [r.to_dict() for r in sim.run(setpoint=380.0, dt=0.05, n_ticks=600)]

    def test_same_seed_identical_trace(self):
        assert self._run(12345) == self._run(12345)

    def test_different_seed_differs(self):
        assert self._run(1) != self._run(2)


class TestScenarioConfiguration:
    def test_channels_seeded_independently(self):
        sim = ClosedLoopSimulation(seed=12345)
        seeds = {name: sensor.seed for name, sensor in sim.sensors.items()}
        assert seeds == {"s1": 12345 ^ 0xA1, "s2": 12345 ^ 0xB2, "s3": 12345 ^ 0xC3}

    def test_unknown_channel(self):
        sim = ClosedLoopSimulation()
        with pytest.raises(KeyError):
            sim.inject_fault("s4", SensorFault.bias(1.0))
        with pytest.raises(KeyError):
            sim.set_noise_std("s0", 0.1)

    def test_negative_noise_rejected(self):
        with pytest.raises(ValueError):
            ClosedLoopSimulation().set_noise_std("s1", -1.0)

    def test_noise_free_readings_match_truth(self):
        sim = ClosedLoopSimulation(initial_state=PlantState(temp_c=310.0))
        for name in ("s1", "s2", "s3"):
            sim.set_noise_std(name, 0.0)
        sim.inject_fault("s2", SensorFault.bias(4.0))

        record = sim.tick(350.0, 0.05)
        assert record.s1_c == 310.0
        assert record.s2_c == 314.0
        assert record.s3_c == 310.0

    def test_record_fields(self):
        sim = ClosedLoopSimulation()
        sim.set_coolant(0.4)
        first = sim.tick(350.0, 0.05)
        second = sim.tick(350.0, 0.05)
        assert first.t_s == 0.0
        assert second.t_s == pytest.approx(0.05)
        assert second.coolant == 0.4
        assert 0.0 <= second.power <= 1.0
        assert first.reason is None
        assert set(first.to_dict()) == {
            "t_s", "true_temp_c", "s1_c", "s2_c", "s3_c",
            "power", "coolant", "scram", "reason",
        }

    def test_coolant_schedule_applied(self):
        sim = ClosedLoopSimulation()
        sim.set_coolant(0.7)
        records = sim.run(
            350.0, 0.5, 10,
            coolant_schedule=lambda t: 0.05 if t > 2.0 else None,
        )
        assert [r.coolant for r in records[:5]] == [0.7] * 5
        assert [r.coolant for r in records[5:]] == [0.05] * 5

    def test_negative_seed_rejected(self):
        with pytest.raises(ValueError):
            ClosedLoopSimulation(seed=-1)
