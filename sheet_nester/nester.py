# sheet_nester/nester.py
# Greedy multi-board nester:
# - parts are grouped per material; each material is nested independently
# - quantities are expanded into independent instances
# - instances are sorted by area (largest first, stable)
# - boards are opened one at a time; every remaining instance is tried on the
#   new board (first fit, bottom-left) and leftovers roll to the next board
# - a board that accepts nothing ends the material: its leftovers fit no sheet
#
# Parts that fit no sheet are never forced onto a board. optimize_boards() keeps
# the plain list-of-boards contract; run() also reports them as `unplaced`.

from __future__ import annotations

import threading
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from .board import Board
from .cache import NestingCache
from .config import DEFAULTS, NestSettings
from .logger import get_logger
from .progress import NestingCancelled, ProgressCallback
from .types import MaterialGroups, NestingResult, PartInstance, expand_part_types, normalize_groups


SettingsLike = Union[NestSettings, Dict[str, Any], None]


def try_place(part: PartInstance, board: Board, kerf: float, allow_rotation: bool) -> bool:
    """
    Place `part` on `board` in its current orientation, else turned by 90°.

    The turned orientation is evaluated on a copy; the part is only rotated once
    a position is found, so a failed attempt leaves it exactly as it was.
    """
    pos = board.find_best_position(part, kerf)
    if pos is not None:
        board.add_part(part, pos[0], pos[1], kerf)
        return True

    if allow_rotation and not part.rotated and part.can_rotate():
        pos = board.find_best_position(part.turned(), kerf)
        if pos is not None:
            part.rotate()
            board.add_part(part, pos[0], pos[1], kerf)
            return True

    return False


def sort_for_nesting(parts: Iterable[PartInstance]) -> List[PartInstance]:
    """Largest area first; ties keep input order (sorted() is stable)."""
    return sorted(parts, key=lambda p: -p.area)


class Nester:
    def __init__(
        self,
        prepare_every: int = DEFAULTS.progress_prepare_every,
        place_every: int = DEFAULTS.progress_place_every,
    ):
        self.prepare_every = max(1, int(prepare_every))
        self.place_every = max(1, int(place_every))
        self.log = get_logger()

    # ----------------------------
    # Public API
    # ----------------------------

    def optimize_boards(
        self,
        material_groups: Dict[str, Iterable[Any]],
        settings: SettingsLike = None,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> List[Board]:
        """Nest every material group; returns boards in creation order."""
        return self.run(material_groups, settings, progress_callback=progress_callback).boards

    def run(
        self,
        material_groups: Dict[str, Iterable[Any]],
        settings: SettingsLike = None,
        progress_callback: Optional[ProgressCallback] = None,
        *,
        cache: Optional[NestingCache] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> NestingResult:
        groups = normalize_groups(material_groups)
        if not isinstance(settings, NestSettings):
            settings = NestSettings.from_dict(settings)

        if cache is not None:
            cached = cache.get(groups, settings)
            if cached is not None:
                self.log.debug("Nesting result served from cache")
                if progress_callback:
                    progress_callback("Using cached nesting result", 90)
                return cached

        result = NestingResult()
        total_materials = len(groups)

        for material_index, (material, entries) in enumerate(groups.items()):
            base_progress = round(material_index / total_materials * 80, 1)
            if progress_callback:
                progress_callback(f"Processing material: {material}...", base_progress)

            stock_w, stock_h = settings.stock_size(material)
            instances = self._prepare_instances(material, entries, progress_callback, base_progress)

            if progress_callback:
                progress_callback(f"Nesting parts for {material}...", base_progress + 10)

            boards, leftovers = self._nest_material(
                instances,
                material,
                stock_w,
                stock_h,
                settings.kerf_width,
                settings.allow_rotation,
                progress_callback=progress_callback,
                base_progress=base_progress + 10,
                total_materials=total_materials,
                cancel_event=cancel_event,
            )

            self.log.info(
                f"{material}: {len(instances) - len(leftovers)}/{len(instances)} parts on "
                f"{len(boards)} board(s) of {stock_w:g}x{stock_h:g}"
            )
            if leftovers:
                names = ", ".join(sorted({p.name for p in leftovers}))
                self.log.warn(
                    f"{material}: {len(leftovers)} part(s) do not fit a {stock_w:g}x{stock_h:g} sheet: {names}"
                )

            result.boards.extend(boards)
            result.unplaced.extend(leftovers)

        if progress_callback:
            progress_callback("Nesting optimization complete!", 90)

        if cache is not None:
            cache.put(groups, settings, result)

        return result

    # ----------------------------
    # Internals
    # ----------------------------

    def _prepare_instances(
        self,
        material: str,
        entries: List[Tuple[Any, int]],
        progress_callback: Optional[ProgressCallback],
        base_progress: float,
    ) -> List[PartInstance]:
        total = sum(int(q) for _, q in entries)
        instances: List[PartInstance] = []
        for inst in expand_part_types(entries):
            instances.append(inst)
            created = len(instances)
            if progress_callback and (created % self.prepare_every == 0 or created == total):
                sub = round(created / total * 10, 1)
                progress_callback(f"Preparing parts for {material}: {created}/{total}", base_progress + sub)
        return instances

    def _nest_material(
        self,
        parts: List[PartInstance],
        material: str,
        stock_w: float,
        stock_h: float,
        kerf: float,
        allow_rotation: bool,
        *,
        progress_callback: Optional[ProgressCallback] = None,
        base_progress: float = 0.0,
        total_materials: int = 1,
        cancel_event: Optional[threading.Event] = None,
    ) -> Tuple[List[Board], List[PartInstance]]:
        boards: List[Board] = []
        remaining = sort_for_nesting(parts)
        total_initial = len(remaining)
        placed_total = 0

        # share of this material's progress band spent on placement
        band = round(80.0 / max(1, total_materials) * 0.70, 1)

        while remaining:
            board = Board(material, stock_w, stock_h)
            not_yet: List[PartInstance] = []
            placed_here = 0

            for idx, part in enumerate(remaining):
                if cancel_event is not None and cancel_event.is_set():
                    raise NestingCancelled(f"Nesting cancelled while placing parts for {material}")

                if try_place(part, board, kerf, allow_rotation):
                    placed_here += 1
                    placed_total += 1
                else:
                    not_yet.append(part)

                if progress_callback and (idx % self.place_every == 0 or idx == len(remaining) - 1):
                    pct = base_progress + round(placed_total / total_initial * band, 1)
                    progress_callback(
                        f"Placing parts on board #{len(boards) + 1} for {material}. "
                        f"Placed: {placed_total}/{total_initial}...",
                        pct,
                    )

            remaining = not_yet
            if placed_here == 0:
                # nothing left fits an empty sheet
                break
            boards.append(board)

        return boards, remaining
