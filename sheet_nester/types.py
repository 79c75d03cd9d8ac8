# sheet_nester/types.py
# Core data structures for sheet-good nesting.
# Keep this file dependency-light so it can be imported everywhere.

from __future__ import annotations

import copy
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Tuple

if TYPE_CHECKING:
    from .board import Board


# ----------------------------
# Grain direction
# ----------------------------

GRAIN_ANY = "Any"
GRAIN_FIXED = "Fixed"
GRAIN_VERTICAL = "Vertical"
GRAIN_HORIZONTAL = "Horizontal"

# Grain values (lowercase) that forbid a 90° turn
LOCKED_GRAINS = ("fixed", "vertical", "horizontal")


def grain_allows_rotation(grain_direction: Optional[str]) -> bool:
    if not grain_direction:
        return True
    return str(grain_direction).strip().lower() not in LOCKED_GRAINS


# ----------------------------
# Geometry
# ----------------------------

@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in board coordinates (mm)."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    def is_degenerate(self) -> bool:
        return self.width <= 0 or self.height <= 0


# ----------------------------
# Inputs
# ----------------------------

@dataclass(frozen=True)
class PartType:
    """A part definition as extracted from the model (one per unique component)."""
    name: str
    width: float
    height: float
    thickness: float = 18.0
    material: str = "No Material"
    grain_direction: str = GRAIN_ANY
    edge_banding: str = "None"

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Invalid part size for {self.name}: {self.width}x{self.height}")

    @property
    def area(self) -> float:
        return self.width * self.height

    def create_instance(self) -> "PartInstance":
        return PartInstance(
            name=self.name,
            width=float(self.width),
            height=float(self.height),
            thickness=float(self.thickness),
            material=self.material,
            grain_direction=self.grain_direction or GRAIN_ANY,
            edge_banding=self.edge_banding,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any], material: Optional[str] = None) -> "PartType":
        """
        Build from a loosely-typed dict (JSON, host export).
        Accepts "w"/"h" as aliases for "width"/"height".
        """
        name = str(data.get("name") or data.get("id") or "").strip()
        if not name:
            raise ValueError(f"Part type missing name: {data}")
        try:
            width = float(data["width"] if "width" in data else data["w"])
            height = float(data["height"] if "height" in data else data["h"])
        except KeyError as e:
            raise ValueError(f"Part type {name!r} missing dimension {e}") from None
        return cls(
            name=name,
            width=width,
            height=height,
            thickness=float(data.get("thickness", 18.0)),
            material=str(data.get("material") or material or "No Material"),
            grain_direction=str(data.get("grain_direction") or GRAIN_ANY),
            edge_banding=str(data.get("edge_banding") or "None"),
        )


@dataclass
class PartInstance:
    """
    A single placeable instance (expanded from a PartType quantity).

    width/height reflect the current orientation; x/y stay None until the
    instance is placed on a Board.
    """
    name: str
    width: float
    height: float
    thickness: float = 18.0
    material: str = "No Material"
    grain_direction: str = GRAIN_ANY
    edge_banding: str = "None"
    x: Optional[float] = None
    y: Optional[float] = None
    rotated: bool = False
    instance_id: Optional[str] = None

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def is_placed(self) -> bool:
        return self.x is not None and self.y is not None

    def can_rotate(self) -> bool:
        return grain_allows_rotation(self.grain_direction)

    def rotate(self) -> bool:
        """Swap width/height in place. Returns False (and does nothing) if grain forbids it."""
        if not self.can_rotate():
            return False
        self.width, self.height = self.height, self.width
        self.rotated = not self.rotated
        return True

    def turned(self) -> "PartInstance":
        """Rotated copy; self is left untouched."""
        other = copy.copy(self)
        other.width, other.height = self.height, self.width
        other.rotated = not self.rotated
        return other

    def fits(self, board_width: float, board_height: float, kerf: float = 0.0) -> bool:
        w = self.width + kerf
        h = self.height + kerf
        if w <= board_width and h <= board_height:
            return True
        if self.can_rotate():
            return h <= board_width and w <= board_height
        return False

    def footprint(self, kerf: float = 0.0) -> Rect:
        if not self.is_placed:
            raise ValueError(f"Part {self.name} is not placed")
        return Rect(self.x, self.y, self.width + kerf, self.height + kerf)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "instance_id": self.instance_id,
            "name": self.name,
            "width": round(self.width, 2),
            "height": round(self.height, 2),
            "thickness": round(self.thickness, 2),
            "material": self.material,
            "grain_direction": self.grain_direction,
            "edge_banding": self.edge_banding,
            "area": round(self.area, 2),
            "x": round(self.x, 2) if self.x is not None else None,
            "y": round(self.y, 2) if self.y is not None else None,
            "rotated": bool(self.rotated),
        }


# material -> [(part type, total quantity), ...]
MaterialGroups = Dict[str, List[Tuple[PartType, int]]]


def expand_part_types(entries: Iterable[Tuple[PartType, int]]) -> List[PartInstance]:
    """Expand quantities into independent instances (stable order)."""
    out: List[PartInstance] = []
    for part_type, qty in entries:
        if qty < 0:
            raise ValueError(f"quantity must be >= 0 for {part_type.name}")
        for _ in range(int(qty)):
            out.append(part_type.create_instance())
    return out


def normalize_groups(groups: Dict[str, Iterable[Any]]) -> MaterialGroups:
    """
    Normalize material groups at the ingestion boundary.

    Each entry may be a (PartType, qty) tuple or a dict
    {"part_type": PartType | dict, "total_quantity": int}.
    Every part type takes the material of the group it is listed under.
    """
    out: MaterialGroups = {}
    for material, entries in groups.items():
        norm: List[Tuple[PartType, int]] = []
        for entry in entries:
            if isinstance(entry, dict):
                pt = entry.get("part_type")
                qty = entry.get("total_quantity", entry.get("quantity", 1))
                if isinstance(pt, dict):
                    pt = PartType.from_dict(pt, material=material)
                if not isinstance(pt, PartType):
                    raise ValueError(f"Entry for {material!r} has no usable part_type: {entry}")
            else:
                pt, qty = entry
            if pt.material != material:
                # the group key decides which stock the part is cut from
                pt = replace(pt, material=str(material))
            norm.append((pt, int(qty)))
        out[str(material)] = norm
    return out


@dataclass
class NestingResult:
    """Boards in creation order plus the instances that fit no board."""
    boards: List[Board] = field(default_factory=list)
    unplaced: List[PartInstance] = field(default_factory=list)

    def num_boards(self) -> int:
        return len(self.boards)

    def num_placed(self) -> int:
        return sum(len(b.parts) for b in self.boards)

    def all_placed(self) -> bool:
        return not self.unplaced

    def unplaced_by_material(self) -> Dict[str, List[PartInstance]]:
        by_mat: Dict[str, List[PartInstance]] = {}
        for p in self.unplaced:
            by_mat.setdefault(p.material, []).append(p)
        return by_mat
