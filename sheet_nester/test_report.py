# sheet_nester/test_report.py
# Report data, costing and validation over finished nesting results.

from __future__ import annotations

import pytest

from sheet_nester.board import Board
from sheet_nester.config import NestSettings
from sheet_nester.costing import compute_project_cost
from sheet_nester.metrics import compute_solution_metrics
from sheet_nester.nester import Nester
from sheet_nester.report import generate_report_data, get_unit_factor
from sheet_nester.types import NestingResult, PartInstance, PartType
from sheet_nester.validate import raise_on_errors, validate_board, validate_result


def _result():
    settings = NestSettings(
        stock_materials={
            "Oak 18": {"width": 2440, "height": 1220, "price": 85.0, "currency": "EUR"},
            "MDF 16": [1000, 1000],
        },
        kerf_width=0,
        default_currency="EUR",
    )
    groups = {
        "Oak 18": [
            (PartType("Door", 1000, 500, material="Oak 18"), 4),
            (PartType("Plinth", 3000, 100, material="Oak 18"), 1),
        ],
        "MDF 16": [(PartType("Back", 900, 900, material="MDF 16"), 2)],
    }
    return Nester().run(groups, settings), settings


def test_report_sections_and_ids() -> None:
    result, settings = _result()
    report = generate_report_data(result, settings)

    ids = [r["part_unique_id"] for r in report["parts_placed"]]
    assert ids == ["P1", "P2", "P3", "P4", "P5", "P6"]
    assert [r["board_number"] for r in report["parts_placed"]] == [1, 1, 1, 1, 2, 3]
    assert {r["rotated"] for r in report["parts_placed"]} == {"No"}

    assert [r["name"] for r in report["unique_part_types"]] == ["Back", "Door"]
    door = report["unique_part_types"][1]
    assert door["total_quantity"] == 4 and door["total_area"] == 2000000

    assert [r["name"] for r in report["unplaced_parts"]] == ["Plinth"]
    assert [b["board_type"] for b in report["boards"]] == [
        "Oak 18_2440.0x1220.0",
        "MDF 16_1000.0x1000.0",
        "MDF 16_1000.0x1000.0",
    ]

    s = report["summary"]
    assert s["total_parts_instances"] == 6
    assert s["total_unique_part_types"] == 2
    assert s["total_boards"] == 3
    assert s["total_unplaced_parts"] == 1
    assert s["total_stock_area"] == 2440 * 1220 + 2 * 1000 * 1000
    assert s["total_used_area"] == 4 * 500000 + 2 * 810000
    assert s["overall_efficiency"] == pytest.approx(100.0 - s["overall_waste_percentage"])
    assert s["total_project_cost"] == 85.0
    assert s["currency"] == "EUR"


def test_board_types_priced_per_sheet() -> None:
    result, settings = _result()
    cost = compute_project_cost(result.boards, settings)
    assert cost.total_sheets == 3
    assert [(c.material, c.count, c.price_per_sheet, c.currency) for c in cost.board_types] == [
        ("MDF 16", 2, 0.0, "EUR"),
        ("Oak 18", 1, 85.0, "EUR"),
    ]


def test_report_from_plain_board_list() -> None:
    b = Board("MDF 16", 1000, 1000)
    b.add_part(PartInstance("A", 500, 500), 0, 0, 0)
    report = generate_report_data([b], units="in", precision=0)
    assert report["unplaced_parts"] == []
    assert report["summary"]["units"] == "in"
    assert report["summary"]["total_waste_area"] == 750000
    assert b.parts[0].instance_id == "P1"


def test_unit_factors() -> None:
    assert get_unit_factor("mm") == 1.0
    assert get_unit_factor("IN") == 25.4
    assert get_unit_factor("furlong") == 1.0


def test_metrics_totals() -> None:
    result, _ = _result()
    m = compute_solution_metrics(result.boards)
    assert (m.num_boards, m.num_parts) == (3, 6)
    assert m.total_waste_area == m.total_stock_area - m.total_used_area


def test_validation_accepts_nester_output() -> None:
    result, _ = _result()
    issues = validate_result(result)
    assert [i.level for i in issues] == ["WARN"]
    assert issues[0].part_name == "Plinth"
    raise_on_errors(issues)


def test_validation_flags_overlap_and_grain() -> None:
    b = Board("Oak 18", 1000, 1000)
    b.add_part(PartInstance("A", 500, 500), 0, 0, 0)
    locked = PartInstance("B", 500, 500, grain_direction="Fixed", rotated=True)
    b.add_part(locked, 250, 250, 0)

    messages = [i.message for i in validate_board(b) if i.level == "ERROR"]
    assert any(m.startswith("Overlap") for m in messages)
    assert any(m.startswith("Grain-locked") for m in messages)

    with pytest.raises(ValueError):
        raise_on_errors(validate_result(NestingResult(boards=[b])))


def test_validation_flags_placed_unplaced_part() -> None:
    stray = PartInstance("Stray", 100, 100, x=0.0, y=0.0)
    issues = validate_result(NestingResult(unplaced=[stray]))
    assert [i.level for i in issues] == ["ERROR", "WARN"]
