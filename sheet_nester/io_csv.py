# sheet_nester/io_csv.py
# CSV import/export helpers:
# - read a flat parts list (name,width,height,thickness,material,grain_direction,quantity)
# - export placed parts (one row per instance)
# - export the sectioned report (part types / parts placed / boards / unplaced / overall)
#
# (PNG diagrams are handled in plotting.py.)

from __future__ import annotations

import csv
from pathlib import Path
from typing import Any, Dict, List

from .types import MaterialGroups, PartType


def read_parts_csv(path: str | Path) -> MaterialGroups:
    path = Path(path)
    groups: MaterialGroups = {}
    with path.open("r", newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        required = {"name", "width", "height"}
        if not required.issubset(set(reader.fieldnames or [])):
            raise ValueError(f"CSV must contain at least columns: {sorted(required)}")
        for row in reader:
            name = (row.get("name") or "").strip()
            if not name:
                continue
            pt = PartType(
                name=name,
                width=float(row["width"]),
                height=float(row["height"]),
                thickness=float(row.get("thickness") or 18.0),
                material=(row.get("material") or "No Material").strip(),
                grain_direction=(row.get("grain_direction") or "Any").strip(),
                edge_banding=(row.get("edge_banding") or "None").strip(),
            )
            qty = int(float(row.get("quantity") or "1"))
            groups.setdefault(pt.material, []).append((pt, qty))
    return groups


PLACEMENT_FIELDS = [
    "part_unique_id",
    "name",
    "board_number",
    "material",
    "position_x",
    "position_y",
    "width",
    "height",
    "thickness",
    "rotated",
    "grain_direction",
]


def export_placements_csv(report: Dict[str, Any], path: str | Path) -> None:
    """
    One row per placed instance. Coordinates in mm from the sheet's bottom-left corner.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=PLACEMENT_FIELDS, extrasaction="ignore")
        w.writeheader()
        for row in report.get("parts_placed") or []:
            w.writerow(row)


def _report_rows(report: Dict[str, Any]) -> List[List[Any]]:
    rows: List[List[Any]] = []

    rows.append(["UNIQUE PART TYPES SUMMARY"])
    rows.append(["Name", "Width(mm)", "Height(mm)", "Thickness(mm)", "Material", "Grain Direction",
                 "Total Quantity", "Total Area(mm²)"])
    for pt in report.get("unique_part_types") or []:
        rows.append([
            str(pt["name"]),
            float(pt.get("width") or 0),
            float(pt.get("height") or 0),
            float(pt.get("thickness") or 0),
            str(pt.get("material", "")),
            str(pt.get("grain_direction", "")),
            int(pt.get("total_quantity") or 0),
            round(float(pt.get("total_area") or 0), 2),
        ])
    rows.append([])

    rows.append(["PARTS PLACED (DETAILED LIST)"])
    rows.append(["Unique ID", "Name", "Width(mm)", "Height(mm)", "Thickness(mm)", "Material", "Area(mm²)",
                 "Board#", "X Pos(mm)", "Y Pos(mm)", "Rotated", "Grain Direction"])
    for p in report.get("parts_placed") or []:
        rows.append([
            str(p.get("part_unique_id", "")),
            str(p.get("name", "")),
            float(p.get("width") or 0),
            float(p.get("height") or 0),
            float(p.get("thickness") or 0),
            str(p.get("material", "")),
            float(p.get("area") or 0),
            int(p.get("board_number") or 0),
            float(p.get("position_x") or 0),
            float(p.get("position_y") or 0),
            str(p.get("rotated", "")),
            str(p.get("grain_direction", "")),
        ])
    rows.append([])

    rows.append(["BOARDS SUMMARY"])
    rows.append(["Board#", "Material", "Stock Size", "Parts Count", "Used Area(mm²)", "Waste Area(mm²)",
                 "Waste %", "Efficiency %"])
    for b in report.get("boards") or []:
        rows.append([
            int(b.get("board_number") or 0),
            str(b.get("material", "")),
            str(b.get("stock_size", "")),
            int(b.get("parts_count") or 0),
            float(b.get("used_area") or 0),
            float(b.get("waste_area") or 0),
            float(b.get("waste_percentage") or 0),
            float(b.get("efficiency") or 0),
        ])
    rows.append([])

    unplaced = report.get("unplaced_parts") or []
    if unplaced:
        rows.append(["UNPLACED PARTS"])
        rows.append(["Name", "Width(mm)", "Height(mm)", "Thickness(mm)", "Material", "Grain Direction"])
        for p in unplaced:
            rows.append([
                str(p.get("name", "")),
                float(p.get("width") or 0),
                float(p.get("height") or 0),
                float(p.get("thickness") or 0),
                str(p.get("material", "")),
                str(p.get("grain_direction", "")),
            ])
        rows.append([])

    s = report.get("summary") or {}
    rows.append(["OVERALL SUMMARY"])
    rows.append(["Total Parts Instances", int(s.get("total_parts_instances") or 0)])
    rows.append(["Total Unique Part Types", int(s.get("total_unique_part_types") or 0)])
    rows.append(["Total Boards", int(s.get("total_boards") or 0)])
    rows.append(["Total Unplaced Parts", int(s.get("total_unplaced_parts") or 0)])
    rows.append(["Total Stock Area (mm²)", float(s.get("total_stock_area") or 0)])
    rows.append(["Total Used Area (mm²)", float(s.get("total_used_area") or 0)])
    rows.append(["Total Waste Area (mm²)", float(s.get("total_waste_area") or 0)])
    rows.append(["Overall Waste %", float(s.get("overall_waste_percentage") or 0)])
    rows.append(["Overall Efficiency %", float(s.get("overall_efficiency") or 0)])
    rows.append([f"Total Project Cost ({s.get('currency', '')})", float(s.get("total_project_cost") or 0)])
    return rows


def export_report_csv(report: Dict[str, Any], path: str | Path) -> None:
    """Sectioned report in a single CSV file (blank row between sections)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        for row in _report_rows(report):
            w.writerow(row)


def export_all(report: Dict[str, Any], out_dir: str | Path, prefix: str = "nesting") -> None:
    """
    Export placements and the sectioned report into out_dir.
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    export_placements_csv(report, out_dir / f"{prefix}_placements.csv")
    export_report_csv(report, out_dir / f"{prefix}_report.csv")
