from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Literal, Tuple, Union

# Column headers of the assembled tables.
PENSION_ASSUMPTION_COLUMNS: Tuple[str, ...] = ("Assumption", "Value")
PENSION_OUTPUT_COLUMNS: Tuple[str, ...] = ("Output", "Value")
LOAN_ASSUMPTION_COLUMNS: Tuple[str, ...] = ("Assumption", "Value", "Notes")
LOAN_OUTPUT_COLUMNS: Tuple[str, ...] = ("Metric", "Value", "Notes")

ChartType = Literal["line", "bar"]
Cell = Union[str, float, int]


@dataclass(frozen=True)
class Table:
    """Ordered label/value rows; every row has one cell per column."""

    columns: Tuple[str, ...]
    rows: Tuple[Tuple[Cell, ...], ...]

    def __post_init__(self) -> None:
        width = len(self.columns)
        for row in self.rows:
            if len(row) != width:
                raise ValueError(
                    f"Table row {row!r} has {len(row)} cells, expected {width}."
                )

    def to_dict(self) -> Dict[str, Any]:
        return {"columns": list(self.columns), "rows": [list(r) for r in self.rows]}


@dataclass(frozen=True)
class ChartDataset:
    label: str
    data: Tuple[float, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label, "data": list(self.data)}


@dataclass(frozen=True)
class Chart:
    """Chart payload. Every dataset carries exactly one value per label."""

    title: str
    type: ChartType
    labels: Tuple[str, ...]
    datasets: Tuple[ChartDataset, ...]

    def __post_init__(self) -> None:
        if self.type not in ("line", "bar"):
            raise ValueError(f"Unsupported chart type: {self.type!r}")
        for ds in self.datasets:
            if len(ds.data) != len(self.labels):
                raise ValueError(
                    f"Dataset {ds.label!r} in chart {self.title!r} has "
                    f"{len(ds.data)} points for {len(self.labels)} labels."
                )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "type": self.type,
            "labels": list(self.labels),
            "datasets": [ds.to_dict() for ds in self.datasets],
        }
