# sheet_nester/debug.py
# Debug / inspection helpers:
# - pretty-print placed parts and free rectangles
# - quick text summaries of a nesting result

from __future__ import annotations

from typing import Iterable

from .board import Board
from .types import NestingResult, PartInstance, Rect


def print_parts(parts: Iterable[PartInstance]) -> None:
    for p in parts:
        pos = f"x={p.x:7.1f} y={p.y:7.1f}" if p.is_placed else "unplaced       "
        print(
            f"{(p.instance_id or '-'):>6s} {p.name:20s} {pos} "
            f"w={p.width:7.1f} h={p.height:7.1f} "
            f"{'R' if p.rotated else ' '} {p.grain_direction}"
        )


def print_free_rects(rects: Iterable[Rect]) -> None:
    for r in rects:
        print(f"  free x={r.x:7.1f} y={r.y:7.1f} w={r.width:7.1f} h={r.height:7.1f}")


def print_board(board: Board, index: int = 0, show_free: bool = False) -> None:
    print(f"=== Board {index + 1}: {board.material} {board.stock_width:g}x{board.stock_height:g} ===")
    print(
        f"Parts: {len(board.parts)}  Used: {board.used_area:,.0f} mm²  "
        f"Waste: {board.waste_area:,.0f} mm² ({board.waste_percentage():.2f}%)"
    )
    print_parts(board.parts)
    if show_free:
        print("-- Free rectangles --")
        print_free_rects(board.free_rectangles)


def print_result(result: NestingResult, show_free: bool = False) -> None:
    print(f"Boards: {result.num_boards()}  Placed: {result.num_placed()}  Unplaced: {len(result.unplaced)}")
    for i, b in enumerate(result.boards):
        print_board(b, i, show_free=show_free)
    if result.unplaced:
        print("=== Unplaced ===")
        print_parts(result.unplaced)
