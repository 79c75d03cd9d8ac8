# sheet_nester/utils.py
# Small utilities used across the project:
# - timing context manager
# - JSON export for nesting results (boards + parts + unplaced + metrics)
#
# Keeps dependencies minimal (stdlib only).

from __future__ import annotations

import json
import time
from contextlib import contextmanager
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any, Dict, Iterator

from .metrics import compute_solution_metrics
from .types import NestingResult


@contextmanager
def timer(label: str = "timer") -> Iterator[Dict[str, float]]:
    """
    Usage:
      with timer("nest") as t:
          ...
      print(t["seconds"])
    """
    t0 = time.perf_counter()
    payload: Dict[str, float] = {}
    try:
        yield payload
    finally:
        payload["seconds"] = time.perf_counter() - t0


def _to_jsonable(obj: Any) -> Any:
    """Convert dataclasses and other objects to JSON-serializable structures."""
    if is_dataclass(obj) and not isinstance(obj, type):
        return _to_jsonable(asdict(obj))
    if isinstance(obj, dict):
        return {str(k): _to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_to_jsonable(x) for x in obj]
    if isinstance(obj, Path):
        return str(obj)
    return obj


def result_to_dict(result: NestingResult) -> Dict[str, Any]:
    """
    Convert NestingResult to a JSON-friendly dict.
    Keeps only essential fields + metrics.
    """
    m = compute_solution_metrics(result.boards)
    return {
        "boards": [
            dict(b.to_dict(), board_number=i + 1, free_rectangles=[asdict(r) for r in b.free_rectangles])
            for i, b in enumerate(result.boards)
        ],
        "unplaced": [p.to_dict() for p in result.unplaced],
        "totals": {
            "num_boards": m.num_boards,
            "num_parts": m.num_parts,
            "num_unplaced": len(result.unplaced),
            "total_stock_area_mm2": m.total_stock_area,
            "total_used_area_mm2": m.total_used_area,
            "total_waste_area_mm2": m.total_waste_area,
            "waste_percentage": m.waste_percentage,
            "efficiency_percentage": m.efficiency_percentage,
        },
    }


def save_result_json(result: NestingResult, path: str | Path, *, indent: int = 2) -> None:
    """Save nesting result into JSON for debugging/integration."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(_to_jsonable(result_to_dict(result)), f, ensure_ascii=False, indent=indent)


def save_report_json(report: Dict[str, Any], path: str | Path, *, indent: int = 2) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(_to_jsonable(report), f, ensure_ascii=False, indent=indent)
