"""Command-line interface: run a scenario and emit a trace."""

import logging
import sys

import click

from reactor_safety_sim.config.constants import (
    DEFAULT_DT_MS,
    DEFAULT_SECONDS,
    DEFAULT_SEED,
    DEFAULT_SETPOINT_C,
    SCENARIO_NORMAL,
    SCENARIOS,
    TRIP_TEMP_C,
)
from reactor_safety_sim.generator.scenario_runner import ScenarioRunner
from reactor_safety_sim.simulation.scenarios import get_scenario
from reactor_safety_sim.storage.trace_writer import TraceWriter, write_jsonl
from reactor_safety_sim.validation.trace_checks import validate_trace


@click.command()
@click.option("--scenario", type=click.Choice(SCENARIOS), default=SCENARIO_NORMAL,
              help="Scenario to run.")
@click.option("--seconds", default=DEFAULT_SECONDS, help="Total simulation time in seconds.")
@click.option("--dt-ms", default=DEFAULT_DT_MS, help="Fixed time step in milliseconds.")
@click.option("--setpoint", default=DEFAULT_SETPOINT_C, help="Control setpoint temperature (°C).")
@click.option("--trip-temp", default=TRIP_TEMP_C, help="SCRAM trip temperature (°C).")
@click.option("--seed", default=DEFAULT_SEED, type=click.IntRange(min=0),
              help="Master RNG seed for deterministic runs.")
@click.option("--output", default=None, type=click.Path(dir_okay=False),
              help="Trace file (.jsonl or .parquet). Defaults to JSON lines on stdout.")
@click.option("--validate", is_flag=True, help="Check the trace and fail on violations.")
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging.")
def main(scenario, seconds, dt_ms, setpoint, trip_temp, seed, output, validate, verbose):
    """Closed-loop plant simulation with a 2-of-3 voting safety trip."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logger = logging.getLogger(__name__)

    if dt_ms <= 0:
        raise click.BadParameter("must be > 0", param_hint="--dt-ms")

    runner = ScenarioRunner()
    records = runner.run(
        get_scenario(scenario),
        seconds=seconds,
        dt_s=dt_ms / 1000.0,
        setpoint=setpoint,
        trip_temp=trip_temp,
        seed=seed,
    )

    if output:
        path = TraceWriter(output).write(records)
        logger.info(f"Trace written to {path} ({len(records)} ticks)")
    else:
        write_jsonl(records, sys.stdout)

    if validate:
        report = validate_trace(records)
        logger.info(report.summary())
        if not report.passed:
            sys.exit(1)


if __name__ == "__main__":
    main()
