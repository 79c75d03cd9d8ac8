# sheet_nester/sample_data.py
# Utilities to generate sample / random part lists for quick benchmarking and tuning.
# Deterministic for a given seed, so results can be compared run to run.

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Tuple

from .types import GRAIN_ANY, GRAIN_FIXED, GRAIN_HORIZONTAL, GRAIN_VERTICAL, MaterialGroups, PartType


@dataclass(frozen=True)
class RandomPartsConfig:
    seed: int = 123
    materials: Tuple[str, ...] = ("Oak 18", "MDF 16")
    n_unique: int = 20
    qty_range: Tuple[int, int] = (1, 4)

    # size ranges (mm)
    w_range: Tuple[int, int] = (80, 900)
    h_range: Tuple[int, int] = (80, 1100)

    # probability a part is grain-locked
    p_grain_locked: float = 0.35

    # probability a part is "tall" (like cabinet sides)
    p_tall: float = 0.20
    tall_h_range: Tuple[int, int] = (1200, 2300)
    tall_w_range: Tuple[int, int] = (300, 650)

    # probability a part is a "strip" (plinths / rails)
    p_strip: float = 0.15
    strip_h_range: Tuple[int, int] = (60, 180)
    strip_w_range: Tuple[int, int] = (400, 1200)

    thickness: float = 18.0


def generate_random_groups(cfg: RandomPartsConfig) -> MaterialGroups:
    """
    Generate material groups with quantities, sizes and grain constraints.
    Designed to resemble cabinet jobs: some tall sides, some strips, some shelves/doors.
    """
    rnd = random.Random(cfg.seed)
    groups: MaterialGroups = {m: [] for m in cfg.materials}

    for i in range(cfg.n_unique):
        r = rnd.random()
        if r < cfg.p_tall:
            w = rnd.randint(*cfg.tall_w_range)
            h = rnd.randint(*cfg.tall_h_range)
        elif r < cfg.p_tall + cfg.p_strip:
            w = rnd.randint(*cfg.strip_w_range)
            h = rnd.randint(*cfg.strip_h_range)
        else:
            w = rnd.randint(*cfg.w_range)
            h = rnd.randint(*cfg.h_range)

        if rnd.random() < cfg.p_grain_locked:
            grain = rnd.choice([GRAIN_FIXED, GRAIN_VERTICAL, GRAIN_HORIZONTAL])
        else:
            grain = GRAIN_ANY

        material = cfg.materials[i % len(cfg.materials)]
        qty = rnd.randint(*cfg.qty_range)
        groups[material].append(
            (
                PartType(
                    name=f"P{i + 1:02d}",
                    width=float(w),
                    height=float(h),
                    thickness=cfg.thickness,
                    material=material,
                    grain_direction=grain,
                ),
                qty,
            )
        )

    return groups
