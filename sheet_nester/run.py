# sheet_nester/run.py
# High-level convenience runner that ties together:
# - nester (greedy first-fit, bottom-left, per material)
# - validation
# - report data + metrics
# - optional CSV / JSON export
# - optional matplotlib figure (all boards in one figure)
#
# This is meant to be called from your own scripts or a future API layer.
# Example:
#   from sheet_nester.run import run_nesting
#   res = run_nesting(groups, settings, out_dir="out", png="layout.png")

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from .cache import NestingCache
from .config import NestSettings
from .io_csv import export_all
from .metrics import Metrics, compute_solution_metrics
from .nester import Nester, SettingsLike
from .plotting import PlotStyle, plot_boards, save_boards_png
from .progress import ProgressCallback
from .report import generate_report_data
from .types import NestingResult
from .utils import save_report_json, save_result_json, timer
from .validate import raise_on_errors, validate_result


@dataclass
class RunResult:
    result: NestingResult
    report: Dict[str, Any]
    metrics: Metrics
    seconds: float
    figure: Any = None


def run_nesting(
    material_groups: Dict[str, Iterable[Any]],
    settings: SettingsLike = None,
    *,
    validate: bool = True,
    out_dir: Optional[str | Path] = None,
    export_prefix: str = "nesting",
    png: Optional[str | Path] = None,
    plot: bool = False,
    plot_style: Optional[PlotStyle] = None,
    cache: Optional[NestingCache] = None,
    progress_callback: Optional[ProgressCallback] = None,
    nester: Optional[Nester] = None,
) -> RunResult:
    """
    Nest end-to-end. Raises ValueError if validation finds errors.
    Unplaced parts are not errors; they show up in result.unplaced and the report.
    """
    if not isinstance(settings, NestSettings):
        settings = NestSettings.from_dict(settings)
    nester = nester or Nester()

    with timer("nest") as t:
        result = nester.run(material_groups, settings, progress_callback=progress_callback, cache=cache)

    if validate:
        raise_on_errors(validate_result(result))

    report = generate_report_data(result, settings)
    res = RunResult(
        result=result,
        report=report,
        metrics=compute_solution_metrics(result.boards),
        seconds=t["seconds"],
    )

    # Export CSV + JSON if requested
    if out_dir is not None:
        outp = Path(out_dir)
        export_all(report, out_dir=outp, prefix=export_prefix)
        save_result_json(result, outp / f"{export_prefix}_result.json")
        save_report_json(report, outp / f"{export_prefix}_report.json")

    if result.boards:
        style = plot_style or PlotStyle()
        if png is not None:
            save_boards_png(result.boards, str(png), style=style)
        if plot:
            res.figure = plot_boards(result.boards, style=style)

    return res
