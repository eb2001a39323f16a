"""
DataFrame and CSV views of assembled tables and charts.
"""

from __future__ import annotations

import datetime
import re
from typing import Optional

import numpy as np
import pandas as pd

from core.schema import Chart, Table

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9\-_]+")


def table_to_frame(table: Table) -> pd.DataFrame:
    return pd.DataFrame([list(row) for row in table.rows], columns=list(table.columns))


def chart_to_frame(chart: Chart) -> pd.DataFrame:
    """One row per label: a `Label` column then one column per dataset."""
    frame = pd.DataFrame({"Label": list(chart.labels)})
    for dataset in chart.datasets:
        values = np.asarray(dataset.data, dtype=float)
        frame[dataset.label] = np.where(np.isfinite(values), values, 0.0)
    return frame


def chart_to_csv(chart: Chart) -> str:
    return chart_to_frame(chart).to_csv(index=False, lineterminator="\n")


def sanitize_filename_token(text: Optional[str], fallback: str) -> str:
    raw = str(text or fallback).strip()
    cleaned = _UNSAFE_FILENAME_CHARS.sub("_", raw)
    cleaned = re.sub(r"_+", "_", cleaned).strip("_")
    return cleaned or fallback


def export_filename(
    client_name: Optional[str],
    module_title: Optional[str],
    chart_title: Optional[str],
    *,
    on: Optional[datetime.date] = None,
) -> str:
    """e.g. Jane_Doe_Pension_Retirement_Sustainability_Target_Income_2026-10-19.csv"""
    day = on or datetime.date.today()
    tokens = (
        sanitize_filename_token(client_name, "Client"),
        sanitize_filename_token(module_title, "Module"),
        sanitize_filename_token(chart_title, "Chart"),
        day.isoformat(),
    )
    return "_".join(tokens) + ".csv"
