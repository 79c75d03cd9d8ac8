# sheet_nester/test_io.py
# Job JSON / parts CSV ingestion, exports and the end-to-end runner.

from __future__ import annotations

import csv
import json

import pytest

from sheet_nester.config import NestSettings
from sheet_nester.debug import print_result
from sheet_nester.io_csv import export_all, read_parts_csv
from sheet_nester.io_json import job_from_dict, load_job_json, save_job_json
from sheet_nester.report import generate_report_data
from sheet_nester.run import run_nesting
from sheet_nester.types import PartType
from sheet_nester.utils import result_to_dict

JOB = {
    "settings": {
        "kerf_width": 4,
        "allow_rotation": True,
        "stock_materials": {"Oak 18": {"width": 2800, "height": 2070, "price": 90, "currency": "EUR"}},
    },
    "parts": [
        {"name": "Side", "width": 720, "height": 560, "material": "Oak 18", "grain_direction": "Vertical",
         "quantity": 2},
        {"name": "Shelf", "width": 564, "height": 500, "material": "Oak 18", "qty": 3},
        {"name": "Back", "width": 700, "height": 500, "material": "HDF 3", "thickness": 3},
    ],
}


def test_job_from_part_list() -> None:
    job = job_from_dict(JOB)
    assert list(job.groups) == ["Oak 18", "HDF 3"]
    assert [(pt.name, q) for pt, q in job.groups["Oak 18"]] == [("Side", 2), ("Shelf", 3)]
    assert job.groups["HDF 3"][0][1] == 1
    assert job.total_quantity() == 6
    assert job.settings.kerf_width == 4.0
    assert job.settings.stock_size("Oak 18") == (2800.0, 2070.0)


def test_job_from_material_mapping() -> None:
    job = job_from_dict(
        {"parts": {"MDF 16": [{"part_type": {"name": "Door", "width": 400, "height": 700}, "total_quantity": 2}]}}
    )
    pt, qty = job.groups["MDF 16"][0]
    assert (pt.name, pt.material, qty) == ("Door", "MDF 16", 2)
    assert job.settings.kerf_width == 3.0


def test_job_errors() -> None:
    with pytest.raises(ValueError):
        job_from_dict({"settings": {}})
    with pytest.raises(ValueError):
        job_from_dict({"parts": [{"name": "Bad", "width": 10, "height": 10, "quantity": -1}]})
    with pytest.raises(ValueError):
        job_from_dict({"parts": "Side"})


def test_job_file_save_and_load(tmp_path) -> None:
    job = job_from_dict(JOB)
    path = tmp_path / "jobs" / "kitchen.json"
    save_job_json(job.groups, job.settings, path)
    again = load_job_json(path)
    assert again.groups == job.groups
    assert again.settings == job.settings


def test_read_parts_csv(tmp_path) -> None:
    path = tmp_path / "parts.csv"
    path.write_text(
        "name,width,height,thickness,material,grain_direction,quantity\n"
        "Side,720,560,18,Oak 18,Vertical,2\n"
        ",1,1,18,Oak 18,Any,1\n"
        "Back,700,500,3,HDF 3,,1\n",
        encoding="utf-8",
    )
    groups = read_parts_csv(path)
    assert [(pt.name, q) for pt, q in groups["Oak 18"]] == [("Side", 2)]
    back, _ = groups["HDF 3"][0]
    assert back.grain_direction == "Any" and back.thickness == 3.0

    bad = tmp_path / "bad.csv"
    bad.write_text("label,w,h\nx,1,1\n", encoding="utf-8")
    with pytest.raises(ValueError):
        read_parts_csv(bad)


def test_csv_exports(tmp_path) -> None:
    groups = {
        "MDF 16": [
            (PartType("Door", 400, 700, material="MDF 16"), 2),
            (PartType("Plinth", 3000, 100, material="MDF 16"), 1),
        ]
    }
    res = run_nesting(groups, NestSettings(kerf_width=3))
    export_all(res.report, tmp_path, prefix="job")

    with (tmp_path / "job_placements.csv").open(newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert [r["part_unique_id"] for r in rows] == ["P1", "P2"]
    assert rows[0]["board_number"] == "1"

    text = (tmp_path / "job_report.csv").read_text(encoding="utf-8")
    for section in ("UNIQUE PART TYPES SUMMARY", "PARTS PLACED", "BOARDS SUMMARY", "UNPLACED PARTS",
                    "OVERALL SUMMARY", "Total Project Cost (USD)"):
        assert section in text


def test_run_nesting_exports_everything(tmp_path) -> None:
    job = job_from_dict(JOB)
    res = run_nesting(job.groups, job.settings, out_dir=tmp_path / "out", png=tmp_path / "layout.png")

    assert res.result.all_placed()
    assert res.metrics.num_parts == 6
    assert res.seconds >= 0
    assert res.figure is None
    for name in ("nesting_placements.csv", "nesting_report.csv", "nesting_result.json", "nesting_report.json"):
        assert (tmp_path / "out" / name).exists()
    assert (tmp_path / "layout.png").stat().st_size > 0

    data = json.loads((tmp_path / "out" / "nesting_result.json").read_text(encoding="utf-8"))
    assert data["totals"]["num_parts"] == 6
    assert data["totals"]["num_unplaced"] == 0
    assert data["boards"][0]["board_number"] == 1
    assert "free_rectangles" in data["boards"][0]

    report = json.loads((tmp_path / "out" / "nesting_report.json").read_text(encoding="utf-8"))
    assert report["summary"]["total_project_cost"] == 90.0


def test_sides_keep_vertical_grain() -> None:
    job = job_from_dict(JOB)
    res = run_nesting(job.groups, job.settings)
    sides = [p for b in res.result.boards for p in b.parts if p.name == "Side"]
    assert len(sides) == 2
    assert not any(p.rotated for p in sides)


def test_result_dict_and_debug_dump(capsys) -> None:
    res = run_nesting({"MDF 16": [(PartType("Door", 400, 700, material="MDF 16"), 1)]}, {"kerf_width": 0})
    d = result_to_dict(res.result)
    assert d["boards"][0]["parts"][0]["instance_id"] == "P1"
    assert d["totals"]["num_boards"] == 1

    print_result(res.result, show_free=True)
    out = capsys.readouterr().out
    assert "Board 1: MDF 16" in out
    assert "Free rectangles" in out


def test_report_rows_match_part_count() -> None:
    job = job_from_dict(JOB)
    res = run_nesting(job.groups, job.settings)
    report = generate_report_data(res.result, job.settings)
    assert len(report["parts_placed"]) == job.total_quantity()


def test_plot_boards_draws_one_axes_per_board() -> None:
    import matplotlib.pyplot as plt

    from sheet_nester.plotting import PlotStyle, plot_boards

    res = run_nesting({"MDF 16": [(PartType("Back", 900, 900, material="MDF 16"), 3)]},
                      {"stock_materials": {"MDF 16": [1000, 1000]}})
    fig = plot_boards(res.result.boards, style=PlotStyle(show_free_rects=True))
    try:
        visible = [ax for ax in fig.axes if ax.axison]
        assert len(visible) == 3
        assert visible[0].get_title().startswith("Board 1 | MDF 16")
    finally:
        plt.close(fig)

    with pytest.raises(ValueError):
        plot_boards([])
