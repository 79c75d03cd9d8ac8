# sheet_nester/io_json.py
# Load a nesting job from JSON into material groups + NestSettings.
#
# Expected JSON shape:
# {
#   "settings": {"kerf_width": 3.0, "allow_rotation": true,
#                "stock_materials": {"Oak 18": {"width": 2440, "height": 1220, "price": 85.0}}},
#   "parts": [{"name": "Side", "width": 720, "height": 560, "thickness": 18,
#              "material": "Oak 18", "grain_direction": "Vertical", "quantity": 2}, ...]
# }
#
# "parts" may also be the host-export form:
#   {"Oak 18": [{"part_type": {...}, "total_quantity": 2}, ...], ...}

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from .config import NestSettings
from .types import MaterialGroups, PartType, normalize_groups


@dataclass(frozen=True)
class JobLoadResult:
    groups: MaterialGroups
    settings: NestSettings

    def total_quantity(self) -> int:
        return sum(q for entries in self.groups.values() for _, q in entries)


def group_part_list(items: List[Dict[str, Any]]) -> MaterialGroups:
    """Flat part list -> material groups, keeping first-seen material order."""
    groups: MaterialGroups = {}
    for it in items:
        pt = PartType.from_dict(it)
        qty = int(it.get("quantity", it.get("qty", it.get("count", 1))))
        if qty < 0:
            raise ValueError(f"quantity must be >= 0 for {pt.name}")
        groups.setdefault(pt.material, []).append((pt, qty))
    return groups


def job_from_dict(data: Dict[str, Any]) -> JobLoadResult:
    settings = NestSettings.from_dict(data.get("settings") or {})

    parts = data.get("parts")
    if not parts:
        raise ValueError("JSON missing 'parts'.")

    if isinstance(parts, dict):
        groups = normalize_groups(parts)
    elif isinstance(parts, list):
        groups = group_part_list(parts)
    else:
        raise ValueError(f"'parts' must be a list or a mapping, got {type(parts).__name__}")

    return JobLoadResult(groups=groups, settings=settings)


def load_job_json(path: str | Path) -> JobLoadResult:
    """
    Load job definition from JSON and convert to (material groups, NestSettings).
    - part "quantity" (or "qty"/"count") defaults to 1
    - "grain_direction" defaults to "Any"
    - missing stock sizes are resolved later to the default sheet
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError("Job JSON must be an object with 'settings' and 'parts'.")
    return job_from_dict(data)


def groups_to_part_list(groups: MaterialGroups) -> List[Dict[str, Any]]:
    """Inverse of group_part_list (for saving jobs)."""
    out: List[Dict[str, Any]] = []
    for material, entries in groups.items():
        for pt, qty in entries:
            out.append(
                {
                    "name": pt.name,
                    "width": pt.width,
                    "height": pt.height,
                    "thickness": pt.thickness,
                    "material": material,
                    "grain_direction": pt.grain_direction,
                    "edge_banding": pt.edge_banding,
                    "quantity": qty,
                }
            )
    return out


def save_job_json(groups: MaterialGroups, settings: NestSettings, path: str | Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload: Dict[str, Any] = {"settings": settings.to_dict(), "parts": groups_to_part_list(groups)}
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
