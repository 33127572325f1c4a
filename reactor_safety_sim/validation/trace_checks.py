"""Consistency checks over a run trace (latching, actuation bounds, halting)."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence, Union

import pandas as pd
import pyarrow.parquet as pq

from reactor_safety_sim.simulation.closed_loop import TickRecord
from reactor_safety_sim.storage.trace_writer import records_to_dataframe

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    check: str
    passed: bool
    message: str = ""


@dataclass
class ValidationReport:
    results: List[ValidationResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(r.passed for r in self.results)

    @property
    def n_passed(self) -> int:
        return sum(1 for r in self.results if r.passed)

    @property
    def n_failed(self) -> int:
        return sum(1 for r in self.results if not r.passed)

    def failed_checks(self) -> List[str]:
        return [r.check for r in self.results if not r.passed]

    def summary(self) -> str:
        lines = [f"Validation: {self.n_passed} passed, {self.n_failed} failed"]
        for r in self.results:
            status = "PASS" if r.passed else "FAIL"
            lines.append(f"  [{status}] {r.check} {r.message}".rstrip())
        return "\n".join(lines)


def _check(name: str, passed: bool, message: str) -> ValidationResult:
    return ValidationResult(check=name, passed=bool(passed), message="" if passed else message)


def validate_trace(trace: Union[pd.DataFrame, Sequence[TickRecord]]) -> ValidationReport:
    """Validate a trace given as a DataFrame or a list of tick records."""
    if isinstance(trace, pd.DataFrame):
        df = trace.reset_index(drop=True)
    else:
        df = records_to_dataframe(list(trace))

    report = ValidationReport()
    if len(df) == 0:
        logger.warning("Empty trace, nothing to validate")
        return report

    scram = df["scram"].astype(bool)
    has_reason = df["reason"].notna()

    steps = df["t_s"].diff().dropna()
    report.results.append(_check(
        "time_monotonic", (steps > 0).all(),
        f"t_s not strictly increasing at {int((steps <= 0).sum())} rows",
    ))

    power = df["power"]
    in_bounds = (power >= 0.0) & (power <= 1.0)
    report.results.append(_check(
        "power_bounds", in_bounds.all(),
        f"{int((~in_bounds).sum())} rows with power outside [0, 1]",
    ))

    report.results.append(_check(
        "scram_latched", (scram.cummax() == scram).all(),
        "scram reverted to false after tripping",
    ))

    if scram.any():
        first_trip = int(scram.idxmax())
        halted = first_trip == len(df) - 1
        message = f"{len(df) - 1 - first_trip} rows emitted after the trip"
    else:
        halted, message = True, ""
    report.results.append(_check("halt_after_trip", halted, message))

    consistent = (has_reason == scram).all() and df.loc[has_reason, "reason"].nunique() <= 1
    report.results.append(_check(
        "reason_consistency", consistent,
        "trip reason missing, present without scram, or changed",
    ))

    report.results.append(_check(
        "power_off_after_trip", (df.loc[scram, "power"] == 0.0).all(),
        "nonzero power on a tripped tick",
    ))

    return report


def read_trace_file(path: Path) -> pd.DataFrame:
    path = Path(path)
    if path.suffix.lower() == ".parquet":
        return pq.read_table(path).to_pandas()
    return pd.read_json(path, lines=True)


def validate_trace_file(path: Path) -> ValidationReport:
    return validate_trace(read_trace_file(path))
