# sheet_nester/metrics.py
# Area metrics across a whole nesting result:
# - stock area of every used board
# - used area (sum of part areas, kerf excluded)
# - waste area / waste % / efficiency %
#
# Per-board numbers live on Board itself; this only aggregates.

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .board import Board


@dataclass(frozen=True)
class Metrics:
    num_boards: int
    num_parts: int
    total_stock_area: float
    total_used_area: float

    @property
    def total_waste_area(self) -> float:
        return self.total_stock_area - self.total_used_area

    @property
    def waste_percentage(self) -> float:
        if self.total_stock_area <= 0:
            return 0.0
        return round(self.total_waste_area / self.total_stock_area * 100, 2)

    @property
    def efficiency_percentage(self) -> float:
        return 100.0 - self.waste_percentage


def compute_solution_metrics(boards: Iterable[Board]) -> Metrics:
    n_boards = 0
    n_parts = 0
    stock = 0.0
    used = 0.0
    for b in boards:
        n_boards += 1
        n_parts += len(b.parts)
        stock += b.total_area
        used += b.used_area
    return Metrics(num_boards=n_boards, num_parts=n_parts, total_stock_area=stock, total_used_area=used)
