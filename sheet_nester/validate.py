# sheet_nester/validate.py
# Validation utilities:
# - check placed footprints (part + kerf) fit within the stock sheet
# - check no-overlap of footprints per board
# - check the free-rectangle partition still accounts for the whole sheet
# - check grain-locked parts were never rotated
#
# Useful both during development and to sanity-check nester output.

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from .board import Board, intersects
from .types import NestingResult, Rect

# Tolerance for float area sums (mm^2)
AREA_EPS = 1e-6


@dataclass(frozen=True)
class ValidationIssue:
    level: str   # "ERROR" or "WARN"
    message: str
    board_index: Optional[int] = None
    part_name: Optional[str] = None


def _overlap_area(a: Rect, b: Rect) -> float:
    w = min(a.right, b.right) - max(a.x, b.x)
    h = min(a.top, b.top) - max(a.y, b.y)
    if w <= 0 or h <= 0:
        return 0.0
    return w * h


def validate_containment(board: Board, board_index: Optional[int] = None) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    for p, fp in zip(board.parts, board.footprints()):
        if fp.x < 0 or fp.y < 0 or fp.right > board.stock_width or fp.top > board.stock_height:
            issues.append(
                ValidationIssue(
                    level="ERROR",
                    message=(
                        f"Footprint out of stock bounds: x={fp.x}, y={fp.y}, w={fp.width}, h={fp.height}, "
                        f"stock={board.stock_width}x{board.stock_height}"
                    ),
                    board_index=board_index,
                    part_name=p.name,
                )
            )
    return issues


def validate_no_overlap(board: Board, board_index: Optional[int] = None) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    fps = board.footprints()
    for i in range(len(fps)):
        for j in range(i + 1, len(fps)):
            if intersects(fps[i], fps[j]) and _overlap_area(fps[i], fps[j]) > AREA_EPS:
                a, b = board.parts[i], board.parts[j]
                issues.append(
                    ValidationIssue(
                        level="ERROR",
                        message=f"Overlap: {a.name} ({fps[i]}) with {b.name} ({fps[j]})",
                        board_index=board_index,
                        part_name=a.name,
                    )
                )
    return issues


def validate_free_rectangles(board: Board, board_index: Optional[int] = None) -> List[ValidationIssue]:
    """Free area + footprint area must equal the stock area; no free rect may be degenerate."""
    issues: List[ValidationIssue] = []
    for fr in board.free_rectangles:
        if fr.is_degenerate():
            issues.append(
                ValidationIssue(level="ERROR", message=f"Degenerate free rectangle {fr}", board_index=board_index)
            )
        for p, fp in zip(board.parts, board.footprints()):
            if _overlap_area(fr, fp) > AREA_EPS:
                issues.append(
                    ValidationIssue(
                        level="ERROR",
                        message=f"Free rectangle {fr} overlaps footprint {fp}",
                        board_index=board_index,
                        part_name=p.name,
                    )
                )

    covered = board.free_area + board.footprint_area()
    if abs(covered - board.total_area) > AREA_EPS * max(1.0, board.total_area):
        issues.append(
            ValidationIssue(
                level="ERROR",
                message=f"Free + placed area {covered} != stock area {board.total_area}",
                board_index=board_index,
            )
        )
    return issues


def validate_grain(board: Board, board_index: Optional[int] = None) -> List[ValidationIssue]:
    return [
        ValidationIssue(
            level="ERROR",
            message=f"Grain-locked part rotated (grain={p.grain_direction})",
            board_index=board_index,
            part_name=p.name,
        )
        for p in board.parts
        if p.rotated and not p.can_rotate()
    ]


def validate_board(board: Board, board_index: Optional[int] = None) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    issues.extend(validate_containment(board, board_index))
    issues.extend(validate_no_overlap(board, board_index))
    issues.extend(validate_free_rectangles(board, board_index))
    issues.extend(validate_grain(board, board_index))
    if not board.parts:
        issues.append(ValidationIssue(level="WARN", message="Board has no parts.", board_index=board_index))
    return issues


def validate_boards(boards: Iterable[Board]) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    for idx, b in enumerate(boards):
        issues.extend(validate_board(b, idx))
    return issues


def validate_result(result: NestingResult) -> List[ValidationIssue]:
    """
    Validate every board; unplaced parts are reported as warnings.
    Returns a list of issues (empty if OK).
    """
    issues = validate_boards(result.boards)
    for p in result.unplaced:
        if p.is_placed:
            issues.append(
                ValidationIssue(level="ERROR", message="Unplaced part carries a position", part_name=p.name)
            )
        issues.append(
            ValidationIssue(
                level="WARN",
                message=f"Part {p.width:g}x{p.height:g} ({p.material}) fits no stock sheet",
                part_name=p.name,
            )
        )
    return issues


def raise_on_errors(issues: List[ValidationIssue]) -> None:
    errs = [i for i in issues if i.level.upper() == "ERROR"]
    if errs:
        msg = "\n".join(
            f"[{e.level}] board={e.board_index} part={e.part_name} :: {e.message}" for e in errs
        )
        raise ValueError("Validation failed:\n" + msg)
