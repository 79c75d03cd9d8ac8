# sheet_nester/__init__.py
"""
Sheet-good nesting package (panel saw / guillotine-friendly).

Current state:
- per-material greedy nesting: largest parts first, first-fit bottom-left
- maximal-free-rectangle guillotine split with kerf inflation
- 90° rotation honouring grain direction (Fixed / Vertical / Horizontal are locked)
- explicit unplaced-parts report instead of silently dropping oversize parts
- progress channel + background job with cooperative cancellation
- caller-owned LRU cache of nesting results
- report data (instance ids, part/board types, sheet costs), CSV/JSON export
- matplotlib visualization of all boards in one figure
"""

from .types import (
    GRAIN_ANY,
    GRAIN_FIXED,
    GRAIN_HORIZONTAL,
    GRAIN_VERTICAL,
    MaterialGroups,
    NestingResult,
    PartInstance,
    PartType,
    Rect,
    expand_part_types,
    normalize_groups,
)

from .board import Board, intersects, subtract_rect

from .config import DEFAULTS, NestSettings, StockMaterial

from .nester import Nester, try_place

from .progress import NestingCancelled, ProgressChannel, ProgressEvent

from .cache import NestingCache

from .worker import NestingJob, run_in_background

from .report import generate_report_data, get_unit_factor

from .validate import ValidationIssue, raise_on_errors, validate_result

__all__ = [
    # types
    "GRAIN_ANY",
    "GRAIN_FIXED",
    "GRAIN_HORIZONTAL",
    "GRAIN_VERTICAL",
    "MaterialGroups",
    "NestingResult",
    "PartInstance",
    "PartType",
    "Rect",
    "expand_part_types",
    "normalize_groups",
    # board
    "Board",
    "intersects",
    "subtract_rect",
    # config
    "DEFAULTS",
    "NestSettings",
    "StockMaterial",
    # nesting
    "Nester",
    "try_place",
    "NestingCancelled",
    "ProgressChannel",
    "ProgressEvent",
    "NestingCache",
    "NestingJob",
    "run_in_background",
    # reporting
    "generate_report_data",
    "get_unit_factor",
    "ValidationIssue",
    "raise_on_errors",
    "validate_result",
]
