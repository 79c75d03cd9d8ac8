# sheet_nester/costing.py
# Sheet cost utilities:
# - group used boards by (material, stock size) = "board type"
# - price each board type from settings.stock_materials[material]["price"] (per sheet)
# - total project cost = sum over board types
#
# Notes:
# - Materials without a price (or configured as a plain [w, h] pair) cost 0.
# - Currencies are not converted; a board type keeps its own currency and the
#   project total is a plain sum reported in the default currency.

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List

from .board import Board
from .config import NestSettings


@dataclass(frozen=True)
class BoardTypeCost:
    material: str
    stock_width: float
    stock_height: float
    count: int
    total_area: float
    price_per_sheet: float
    currency: str

    @property
    def total_cost(self) -> float:
        return self.count * self.price_per_sheet


@dataclass(frozen=True)
class ProjectCost:
    board_types: List[BoardTypeCost]
    total_sheets: int
    total_cost: float
    currency: str


def board_type_key(board: Board) -> str:
    return f"{board.material}_{board.stock_width:.1f}x{board.stock_height:.1f}"


def compute_board_type_costs(boards: Iterable[Board], settings: NestSettings) -> List[BoardTypeCost]:
    """One entry per distinct (material, stock size), sorted by material (stable)."""
    counts: Dict[str, List[Board]] = {}
    for b in boards:
        counts.setdefault(board_type_key(b), []).append(b)

    out: List[BoardTypeCost] = []
    for same in counts.values():
        first = same[0]
        price, currency = settings.stock_price(first.material)
        out.append(
            BoardTypeCost(
                material=first.material,
                stock_width=first.stock_width,
                stock_height=first.stock_height,
                count=len(same),
                total_area=sum(b.total_area for b in same),
                price_per_sheet=float(price),
                currency=currency,
            )
        )
    out.sort(key=lambda c: c.material)
    return out


def compute_project_cost(boards: Iterable[Board], settings: NestSettings) -> ProjectCost:
    types = compute_board_type_costs(boards, settings)
    return ProjectCost(
        board_types=types,
        total_sheets=sum(t.count for t in types),
        total_cost=sum(t.total_cost for t in types),
        currency=settings.default_currency,
    )
