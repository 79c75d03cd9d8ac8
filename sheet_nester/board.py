# sheet_nester/board.py
# One stock sheet of one material, packed with a maximal-free-rectangle
# guillotine split:
# - free rectangles start as the whole sheet
# - placing a part carves its kerf-inflated footprint out of every free rect it touches
# - each touched free rect becomes up to 4 residuals (left / right / below / above)
# - free rects are kept sorted by (y, x) so the first fit is the bottom-left-most one
#
# Free rects are never merged back together. This loses some density but keeps
# the partition disjoint, so free area + footprint area always equals the sheet area.

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from .types import PartInstance, Rect


def intersects(a: Rect, b: Rect) -> bool:
    """Separating-axis test; touching edges do not count as intersection."""
    return not (
        a.x + a.width <= b.x or      # a is left of b
        b.x + b.width <= a.x or      # a is right of b
        a.y + a.height <= b.y or     # a is below b
        b.y + b.height <= a.y        # a is above b
    )


def subtract_rect(original: Rect, cut: Rect) -> List[Rect]:
    """
    Remove `cut` from `original`, returning the residual pieces.

    Left and right residuals span the full height of `original`; the
    below and above residuals are limited to the intersection's x-range,
    so the pieces never overlap each other.
    """
    ix1 = max(original.x, cut.x)
    iy1 = max(original.y, cut.y)
    ix2 = min(original.right, cut.right)
    iy2 = min(original.top, cut.top)

    if ix2 <= ix1 or iy2 <= iy1:
        return [original]

    pieces: List[Rect] = []
    if original.x < ix1:
        pieces.append(Rect(original.x, original.y, ix1 - original.x, original.height))
    if original.right > ix2:
        pieces.append(Rect(ix2, original.y, original.right - ix2, original.height))
    if original.y < iy1:
        pieces.append(Rect(ix1, original.y, ix2 - ix1, iy1 - original.y))
    if original.top > iy2:
        pieces.append(Rect(ix1, iy2, ix2 - ix1, original.top - iy2))

    return [r for r in pieces if not r.is_degenerate()]


class Board:
    """A single stock sheet: placed parts + the free-rectangle partition of the rest."""

    def __init__(self, material: str, stock_width: float, stock_height: float):
        self.material = material
        self.stock_width = float(stock_width)
        self.stock_height = float(stock_height)
        self.parts: List[PartInstance] = []
        self.free_rectangles: List[Rect] = [Rect(0.0, 0.0, self.stock_width, self.stock_height)]
        # kerf used for each placed part, in placement order
        self._kerfs: List[float] = []

    def __repr__(self) -> str:
        return (
            f"Board(material={self.material!r}, stock={self.stock_width:g}x{self.stock_height:g}, "
            f"parts={len(self.parts)}, free_rects={len(self.free_rectangles)})"
        )

    # ----------------------------
    # Placement
    # ----------------------------

    def within_bounds(self, part: PartInstance, x: float, y: float, kerf: float = 0.0) -> bool:
        return x + part.width + kerf <= self.stock_width and y + part.height + kerf <= self.stock_height

    def find_best_position(self, part: PartInstance, kerf: float = 0.0) -> Optional[Tuple[float, float]]:
        """
        First fit over free rects in (y, x) order, i.e. bottom-most then left-most.
        Returns (x, y) or None if no free rect can hold the part in its current orientation.
        """
        need_w = part.width + kerf
        need_h = part.height + kerf

        for fr in self.free_rectangles:
            if need_w <= fr.width and need_h <= fr.height:
                if self.within_bounds(part, fr.x, fr.y, kerf):
                    return fr.x, fr.y
        return None

    def add_part(self, part: PartInstance, x: float, y: float, kerf: float = 0.0) -> None:
        part.x = x
        part.y = y
        self.parts.append(part)
        self._kerfs.append(float(kerf))

        placed = Rect(x, y, part.width + kerf, part.height + kerf)

        updated: List[Rect] = []
        for fr in self.free_rectangles:
            if intersects(fr, placed):
                updated.extend(subtract_rect(fr, placed))
            else:
                updated.append(fr)

        self.free_rectangles = [r for r in updated if not r.is_degenerate()]
        self.free_rectangles.sort(key=lambda r: (r.y, r.x))

    # ----------------------------
    # Derived metrics (recomputed on demand)
    # ----------------------------

    @property
    def total_area(self) -> float:
        return self.stock_width * self.stock_height

    @property
    def used_area(self) -> float:
        return sum(p.area for p in self.parts)

    @property
    def waste_area(self) -> float:
        return self.total_area - self.used_area

    @property
    def free_area(self) -> float:
        return sum(r.area for r in self.free_rectangles)

    def footprints(self) -> List[Rect]:
        """Kerf-inflated rectangles actually consumed by each placed part."""
        return [p.footprint(k) for p, k in zip(self.parts, self._kerfs)]

    def footprint_area(self) -> float:
        return sum(r.area for r in self.footprints())

    def waste_percentage(self) -> float:
        if self.total_area == 0.0:
            return 0.0
        return round(self.waste_area / self.total_area * 100, 2)

    def efficiency_percentage(self) -> float:
        return 100.0 - self.waste_percentage()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "material": self.material,
            "stock_width": self.stock_width,
            "stock_height": self.stock_height,
            "parts_count": len(self.parts),
            "used_area": self.used_area,
            "waste_area": self.waste_area,
            "waste_percentage": self.waste_percentage(),
            "efficiency_percentage": self.efficiency_percentage(),
            "parts": [p.to_dict() for p in self.parts],
        }
