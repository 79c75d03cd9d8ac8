# sheet_nester/cli.py
# Command line front-end:
# - job JSON or flat parts CSV input
# - optional CSV + JSON export folder
# - prints per-board summary, unplaced parts and project cost
# - optional PNG / matplotlib window of all boards
#
# Run:
#   python -m sheet_nester --job job.json --out out/
#   python -m sheet_nester --parts parts.csv --board 2800x2070 --kerf 4 --png layout.png
#
# CSV parts format (header required):
#   name,width,height,thickness,material,grain_direction,quantity

from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional

from .config import (
    NestSettings,
    get_cached_settings,
    load_global_settings,
    parse_board_text,
    save_global_settings,
)
from .debug import print_result
from .io_csv import read_parts_csv
from .io_json import load_job_json
from .logger import set_debug, set_enabled
from .plotting import PlotStyle, show_boards
from .run import run_nesting


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Sheet-good nesting (first-fit bottom-left, per material)")
    src = p.add_mutually_exclusive_group(required=True)
    src.add_argument("--job", type=str, help="Path to job JSON (settings + parts)")
    src.add_argument("--parts", type=str, help="Path to parts CSV")

    p.add_argument("--board", type=str, default="", help="Sheet WxH in mm for materials without stock, e.g. 2800x2070")
    p.add_argument("--kerf", type=float, default=-1.0, help="Override kerf (mm). -1 = use job settings")
    p.add_argument("--no_rotation", action="store_true", help="Never rotate parts")
    p.add_argument("--config", type=str, default="", help="Global settings JSON (stock table fallback)")
    p.add_argument("--save_stock", action="store_true", help="Store the job's stock table in the global settings")

    p.add_argument("--out", type=str, default="", help="Output directory for CSV + JSON exports (optional)")
    p.add_argument("--prefix", type=str, default="nesting", help="Export filename prefix")
    p.add_argument("--png", type=str, default="", help="Save layout as PNG file (optional)")
    p.add_argument("--show", action="store_true", help="Show matplotlib window")
    p.add_argument("--no_labels", action="store_true", help="Hide part labels in plot")
    p.add_argument("--no_dims", action="store_true", help="Hide part dims in plot")

    p.add_argument("--verbose", action="store_true", help="Print every placed part")
    p.add_argument("--debug", action="store_true", help="Debug logging")
    p.add_argument("--quiet", action="store_true", help="No nester log lines")
    return p


def main(argv: Optional[List[str]] = None) -> None:
    args = build_argparser().parse_args(argv)

    set_enabled(not args.quiet)
    set_debug(bool(args.debug))

    if args.job:
        job_path = Path(args.job)
        if not job_path.exists():
            raise SystemExit(f"Job JSON not found: {job_path}")
        loaded = load_job_json(job_path)
        groups, settings = loaded.groups, loaded.settings
    else:
        groups = read_parts_csv(Path(args.parts))
        settings = NestSettings()
    if not groups:
        raise SystemExit("No parts found.")

    global_settings = load_global_settings(Path(args.config)) if args.config else get_cached_settings()
    settings = settings.with_stock_fallback(global_settings.get("stock_materials"))

    if args.board.strip():
        w, h = parse_board_text(args.board)
        settings = settings.with_default_sheet(groups.keys(), w, h)
    if args.kerf >= 0:
        settings.kerf_width = float(args.kerf)
    if args.no_rotation:
        settings.allow_rotation = False

    if args.save_stock:
        cfg_path = Path(args.config) if args.config else None
        save_global_settings({"stock_materials": settings.stock_materials}, cfg_path)

    style = PlotStyle(show_labels=not args.no_labels, show_dims=not args.no_dims)

    res = run_nesting(
        groups,
        settings,
        validate=True,
        out_dir=args.out.strip() or None,
        export_prefix=args.prefix,
        png=args.png.strip() or None,
        plot_style=style,
    )

    summary = res.report["summary"]
    print(f"Kerf: {settings.kerf_width:g} mm  Rotation: {'on' if settings.allow_rotation else 'off'}")
    print(f"Boards used: {summary['total_boards']}  ({res.seconds:.3f} s)")
    print(
        f"Parts placed: {summary['total_parts_instances']}  "
        f"unplaced: {summary['total_unplaced_parts']}"
    )
    print(f"Overall efficiency: {summary['overall_efficiency']:.2f}%  waste: {summary['total_waste_area']:,} mm²")
    print(f"Project cost: {summary['total_project_cost']:.2f} {summary['currency']}")

    for b in res.report["boards"]:
        print(
            f"- Board {b['board_number']}: {b['material']} {b['stock_size']}, parts={b['parts_count']}, "
            f"efficiency={b['efficiency']:.2f}%"
        )
    for p in res.report["unplaced_parts"]:
        print(f"! Unplaced: {p['name']} {p['width']:g}x{p['height']:g} ({p['material']}, grain {p['grain_direction']})")

    if args.verbose:
        print_result(res.result)

    if args.out.strip():
        print(f"Exported CSV + JSON to: {args.out.strip()}")
    if args.png.strip():
        print(f"Layout saved to: {args.png.strip()}")

    if args.show and res.result.boards:
        show_boards(res.result.boards, style=style)


if __name__ == "__main__":
    main()
