# sheet_nester/report.py
# Report data for a nesting result (input for CSV/JSON exports and UIs).
#
# All lengths stay in mm; `units` is only carried along so the presentation
# layer can convert with get_unit_factor(). Instance ids P1..Pn are assigned
# here, in board order, and written back onto the placed PartInstances.

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Union

from .board import Board
from .config import NestSettings
from .costing import board_type_key, compute_project_cost
from .metrics import compute_solution_metrics
from .types import NestingResult, PartInstance

UNIT_FACTORS = {
    "mm": 1.0,
    "cm": 10.0,
    "in": 25.4,
    "ft": 304.8,
}


def get_unit_factor(units: str) -> float:
    """mm per display unit; unknown units are treated as mm."""
    return UNIT_FACTORS.get(str(units).lower(), 1.0)


def assign_instance_ids(boards: Sequence[Board], prefix: str = "P") -> int:
    """Number every placed part P1, P2, ... in board order. Returns the count."""
    counter = 0
    for b in boards:
        for p in b.parts:
            counter += 1
            p.instance_id = f"{prefix}{counter}"
    return counter


def _part_row(p: PartInstance, board_number: int, units: str, precision: int) -> Dict[str, Any]:
    return {
        "part_unique_id": p.instance_id,
        "name": p.name,
        "width": round(p.width, 2),
        "height": round(p.height, 2),
        "thickness": round(p.thickness, 2),
        "material": p.material,
        "area": round(p.area, precision),
        "board_number": board_number,
        "position_x": round(p.x or 0.0, 2),
        "position_y": round(p.y or 0.0, 2),
        "rotated": "Yes" if p.rotated else "No",
        "grain_direction": p.grain_direction or "Any",
        "edge_banding": p.edge_banding,
        "units": units,
    }


def generate_report_data(
    result: Union[NestingResult, Sequence[Board]],
    settings: Optional[NestSettings] = None,
    *,
    units: Optional[str] = None,
    currency: Optional[str] = None,
    precision: Optional[int] = None,
) -> Dict[str, Any]:
    settings = settings or NestSettings()
    units = units or settings.units
    currency = currency or settings.default_currency
    precision = settings.precision if precision is None else int(precision)

    if isinstance(result, NestingResult):
        boards: List[Board] = list(result.boards)
        unplaced: List[PartInstance] = list(result.unplaced)
    else:
        boards = list(result)
        unplaced = []

    assign_instance_ids(boards)

    parts_placed: List[Dict[str, Any]] = []
    unique_parts: Dict[str, Dict[str, Any]] = {}
    boards_summary: List[Dict[str, Any]] = []

    for idx, board in enumerate(boards):
        board_number = idx + 1
        boards_summary.append(
            {
                "board_number": board_number,
                "board_type": board_type_key(board),
                "material": board.material,
                "stock_size": f"{board.stock_width:.1f} x {board.stock_height:.1f} mm",
                "stock_width": board.stock_width,
                "stock_height": board.stock_height,
                "parts_count": len(board.parts),
                "used_area": board.used_area,
                "waste_area": board.waste_area,
                "waste_percentage": board.waste_percentage(),
                "efficiency": board.efficiency_percentage(),
                "units": units,
                "precision": precision,
            }
        )

        for p in board.parts:
            parts_placed.append(_part_row(p, board_number, units, precision))

            summary = unique_parts.setdefault(
                p.name,
                {
                    "name": p.name,
                    "width": round(p.width, 2),
                    "height": round(p.height, 2),
                    "thickness": round(p.thickness, 2),
                    "material": p.material,
                    "grain_direction": p.grain_direction or "Any",
                    "total_quantity": 0,
                    "total_area": 0.0,
                    "units": units,
                },
            )
            summary["total_quantity"] += 1
            summary["total_area"] += p.area

    cost = compute_project_cost(boards, settings)
    board_types = [
        {
            "material": c.material,
            "dimensions_mm": f"{c.stock_width:.1f} x {c.stock_height:.1f} mm",
            "stock_width": c.stock_width,
            "stock_height": c.stock_height,
            "count": c.count,
            "total_area": c.total_area,
            "price_per_sheet": c.price_per_sheet,
            "currency": c.currency,
            "total_cost": c.total_cost,
            "units": units,
        }
        for c in cost.board_types
    ]

    unplaced_rows = [
        {
            "name": p.name,
            "width": round(p.width, 2),
            "height": round(p.height, 2),
            "thickness": round(p.thickness, 2),
            "material": p.material,
            "grain_direction": p.grain_direction or "Any",
            "units": units,
        }
        for p in unplaced
    ]

    m = compute_solution_metrics(boards)
    total_cost = cost.total_cost

    return {
        "parts_placed": parts_placed,
        "unique_part_types": sorted(unique_parts.values(), key=lambda r: r["name"]),
        "unique_board_types": board_types,
        "boards": boards_summary,
        "unplaced_parts": unplaced_rows,
        "summary": {
            "total_parts_instances": len(parts_placed),
            "total_unique_part_types": len(unique_parts),
            "total_boards": len(boards),
            "total_unplaced_parts": len(unplaced_rows),
            "total_stock_area": round(m.total_stock_area, precision),
            "total_used_area": round(m.total_used_area, precision),
            "total_waste_area": round(m.total_waste_area, precision),
            "overall_waste_percentage": m.waste_percentage,
            "overall_efficiency": m.efficiency_percentage,
            "total_project_cost": round(total_cost, 2),
            "currency": currency,
            "units": units,
            "precision": precision,
        },
    }
