"""Statistic records and the per-band result table."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Sequence


class StatMode(str, Enum):
    """Central statistic computed for each band."""

    MEAN = "mean"
    COVERAGE_FRACTION = "coverage"


@dataclass(frozen=True)
class StatPoint:
    """One aggregate for one band; count 0 means no valid pixels."""

    value: float
    count: int

    def as_dict(self) -> dict[str, float | int]:
        return {"value": self.value, "count": self.count}


EMPTY_POINT = StatPoint(0.0, 0)


@dataclass
class ResultTable:
    """Rows of StatPoints: the central statistic followed by deciles."""

    columns: int
    rows: list[tuple[StatPoint, ...]] = field(default_factory=list)

    def append(self, row: Sequence[StatPoint]) -> None:
        """Append one band row, enforcing the table width."""
        if len(row) != self.columns:
            raise ValueError(f"Result row has {len(row)} columns, expected {self.columns}.")
        self.rows.append(tuple(row))

    def extend(self, rows: Iterable[Sequence[StatPoint]]) -> None:
        for row in rows:
            self.append(row)

    @property
    def shape(self) -> tuple[int, int]:
        return (len(self.rows), self.columns)

    def flat(self) -> list[StatPoint]:
        """Return all points row-major."""
        return [point for row in self.rows for point in row]

    def __len__(self) -> int:
        return len(self.rows)
