# sheet_nester/test_types.py
# Part model tests: rotation, grain lock, fit checks, ingestion helpers.
#   python -m pytest sheet_nester/test_types.py

from __future__ import annotations

import pytest

from sheet_nester.types import (
    GRAIN_FIXED,
    PartInstance,
    PartType,
    expand_part_types,
    grain_allows_rotation,
    normalize_groups,
)


def test_rotate_twice_restores_part() -> None:
    p = PartInstance("Shelf", 600, 300)
    assert p.rotate()
    assert (p.width, p.height, p.rotated) == (300, 600, True)
    assert p.rotate()
    assert (p.width, p.height, p.rotated) == (600, 300, False)
    assert p.area == 180000


@pytest.mark.parametrize("grain", ["Fixed", "vertical", "HORIZONTAL", " Vertical "])
def test_locked_grain_never_rotates(grain: str) -> None:
    p = PartInstance("Door", 300, 600, grain_direction=grain)
    assert not p.can_rotate()
    assert p.rotate() is False
    assert (p.width, p.height, p.rotated) == (300, 600, False)


@pytest.mark.parametrize("grain", ["Any", "", None, "Diagonal"])
def test_other_grain_values_allow_rotation(grain) -> None:
    assert grain_allows_rotation(grain)


def test_turned_leaves_original_untouched() -> None:
    p = PartInstance("Side", 720, 560)
    t = p.turned()
    assert (t.width, t.height, t.rotated) == (560, 720, True)
    assert (p.width, p.height, p.rotated) == (720, 560, False)


def test_fits_checks_both_orientations_with_kerf() -> None:
    p = PartInstance("Rail", 600, 300)
    assert p.fits(600, 300, 0)
    assert not p.fits(600, 300, 1)
    assert p.fits(500, 1000, 0)  # only when turned

    locked = PartInstance("Rail", 600, 300, grain_direction=GRAIN_FIXED)
    assert not locked.fits(500, 1000, 0)

    too_long = PartInstance("Plinth", 1200, 200)
    assert not too_long.fits(1000, 1000, 0)


def test_footprint_requires_placement() -> None:
    p = PartInstance("Top", 100, 50)
    with pytest.raises(ValueError):
        p.footprint(3)
    p.x, p.y = 10.0, 20.0
    fp = p.footprint(3)
    assert (fp.x, fp.y, fp.width, fp.height) == (10.0, 20.0, 103, 53)


def test_part_type_rejects_bad_size() -> None:
    with pytest.raises(ValueError):
        PartType("Bad", 0, 100)
    with pytest.raises(ValueError):
        PartType("Bad", 100, -5)


def test_part_type_from_dict_aliases_and_defaults() -> None:
    pt = PartType.from_dict({"name": "Back", "w": 700, "h": 500}, material="HDF 3")
    assert (pt.width, pt.height) == (700.0, 500.0)
    assert pt.material == "HDF 3"
    assert pt.grain_direction == "Any"
    assert pt.edge_banding == "None"

    with pytest.raises(ValueError):
        PartType.from_dict({"name": "NoHeight", "width": 10})
    with pytest.raises(ValueError):
        PartType.from_dict({"width": 10, "height": 10})


def test_instances_are_independent() -> None:
    pt = PartType("Shelf", 500, 300)
    a, b = expand_part_types([(pt, 2)])
    a.rotate()
    a.x = 5.0
    assert (b.width, b.height, b.x, b.rotated) == (500, 300, None, False)


def test_expand_part_types_quantities() -> None:
    pt = PartType("Shelf", 500, 300)
    assert expand_part_types([(pt, 0)]) == []
    assert len(expand_part_types([(pt, 3)])) == 3
    with pytest.raises(ValueError):
        expand_part_types([(pt, -1)])


def test_normalize_groups_accepts_dict_entries() -> None:
    groups = normalize_groups(
        {
            "Oak 18": [
                {"part_type": {"name": "Side", "width": 720, "height": 560}, "total_quantity": 2},
                (PartType("Shelf", 500, 300, material="Oak 18"), 1),
            ]
        }
    )
    (side, q1), (shelf, q2) = groups["Oak 18"]
    assert side.name == "Side" and side.material == "Oak 18" and q1 == 2
    assert shelf.name == "Shelf" and q2 == 1

    with pytest.raises(ValueError):
        normalize_groups({"Oak 18": [{"total_quantity": 1}]})
