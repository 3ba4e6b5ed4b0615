"""
Sampled-tick KPI table stored as metrics.csv in a run directory.

Rows are the dicts produced by `MetricsCollector.collect`. The column set and
order are fixed by `MetricsCollector.kpi_dtypes()`: booleans are written as
0/1 and floats rounded, so `load_kpi_table` gives back the same dtypes that
the charts were drawn from in the live session.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable

import pandas as pd

from aquarium.simulation.metrics import MetricsCollector

FLOAT_DIGITS = 3


def encode_row(kpis: dict) -> list:
    """
    Order and type one KPI dict for writing.

    Raises:
        KeyError: If a KPI column is missing from the row.
    """
    row = []
    for name, dtype in MetricsCollector.kpi_dtypes().items():
        value = kpis[name]
        if dtype == "bool":
            row.append(int(bool(value)))
        elif dtype == "float64":
            row.append(round(float(value), FLOAT_DIGITS))
        else:
            row.append(int(value))
    return row


def load_kpi_table(path: str | Path) -> pd.DataFrame:
    """
    Read a metrics.csv back into a typed DataFrame.

    Columns outside the KPI set are kept as pandas parses them; known
    columns that are absent (older runs) are simply missing.

    Raises:
        OSError: File unreadable.
        pandas.errors.EmptyDataError: Empty file.
        ValueError: A known column holds values of the wrong type.
    """
    df = pd.read_csv(path)
    for name, dtype in MetricsCollector.kpi_dtypes().items():
        if name in df.columns:
            df[name] = df[name].astype(dtype)
    return df


class KPITable:
    """
    Append-only KPI table for one run.

    The header is written when the file is created; reopening an existing
    table appends below its rows.

    Attributes:
        file_path: Path to the CSV file.
    """

    def __init__(self, file_path: str | Path):
        self.file_path = Path(file_path)
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        if not self.file_path.exists() or self.file_path.stat().st_size == 0:
            with open(self.file_path, "w", newline="", encoding="utf-8") as f:
                csv.writer(f).writerow(MetricsCollector.kpi_names())

    def append(self, kpis: dict) -> None:
        """Add one sampled tick."""
        self.extend([kpis])

    def extend(self, rows: Iterable[dict]) -> int:
        """
        Add several sampled ticks in one write.

        Returns:
            Number of rows written.
        """
        encoded = [encode_row(kpis) for kpis in rows]
        with open(self.file_path, "a", newline="", encoding="utf-8") as f:
            csv.writer(f).writerows(encoded)
        return len(encoded)

    def load(self) -> pd.DataFrame:
        return load_kpi_table(self.file_path)
