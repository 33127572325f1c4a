"""PyArrow schema for Parquet trace output."""

import pyarrow as pa

TRACE_COLUMNS = [
    "t_s",
    "true_temp_c",
    "s1_c",
    "s2_c",
    "s3_c",
    "power",
    "coolant",
    "scram",
    "reason",
]


def build_trace_schema() -> pa.Schema:
    """One row per tick. Sensor columns hold NaN for dropout ticks."""
    fields = []

    fields.append(pa.field("t_s", pa.float64()))
    fields.append(pa.field("true_temp_c", pa.float64()))
    for col in ("s1_c", "s2_c", "s3_c"):
        fields.append(pa.field(col, pa.float64()))
    fields.append(pa.field("power", pa.float64()))
    fields.append(pa.field("coolant", pa.float64()))
    fields.append(pa.field("scram", pa.bool_()))
    fields.append(pa.field("reason", pa.string(), nullable=True))

    return pa.schema(fields)


TRACE_SCHEMA = build_trace_schema()
