"""Write run traces as JSON lines or Parquet."""

import json
import math
from pathlib import Path
from typing import Dict, Iterable, List, TextIO

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from reactor_safety_sim.simulation.closed_loop import TickRecord
from reactor_safety_sim.storage.schema_definition import TRACE_COLUMNS, TRACE_SCHEMA


def record_to_json_dict(record: TickRecord) -> Dict:
    """Record as a JSON-safe dict: non-finite floats become null."""
    row = record.to_dict()
    for key, value in row.items():
        if isinstance(value, float) and not math.isfinite(value):
            row[key] = None
    return row


def write_jsonl(records: Iterable[TickRecord], stream: TextIO) -> int:
    """Write one JSON object per line. Returns the number of lines written."""
    n = 0
    for record in records:
        stream.write(json.dumps(record_to_json_dict(record)) + "\n")
        n += 1
    return n


def records_to_dataframe(records: List[TickRecord]) -> pd.DataFrame:
    df = pd.DataFrame([r.to_dict() for r in records], columns=TRACE_COLUMNS)
    return df.astype({"scram": bool})


class TraceWriter:
    """Writes a trace to a file, format chosen by suffix (.jsonl or .parquet)."""

    def __init__(self, output_path: Path):
        self.output_path = Path(output_path)

    def write(self, records: List[TickRecord]) -> Path:
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        suffix = self.output_path.suffix.lower()

        if suffix == ".parquet":
            df = records_to_dataframe(records)
            table = pa.Table.from_pandas(df, schema=TRACE_SCHEMA, preserve_index=False)
            pq.write_table(table, self.output_path, compression="snappy")
        elif suffix in (".jsonl", ".json"):
            with open(self.output_path, "w", encoding="utf-8") as fh:
                write_jsonl(records, fh)
        else:
            raise ValueError(
                f"Unsupported trace format {suffix!r}, use .jsonl or .parquet"
            )

        return self.output_path
