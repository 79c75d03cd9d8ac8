# sheet_nester/cache.py
# LRU cache for whole nesting results.
#
# Design:
# - The cache is an explicit object owned by the caller and passed into Nester.run(...).
#   There is no module-level cache state.
# - Key = stable hash of (material groups in input order, resolved stock sizes, kerf, rotation flag).
#   Input order is part of the key because it decides the greedy tie-breaks.
# - Values are deep copies: callers mutate results (e.g. report assigns instance ids),
#   so what we hand out must never alias what we store.

from __future__ import annotations

import copy
import hashlib
from typing import Dict, List, Optional, Tuple

from .config import DEFAULTS, NestSettings
from .types import MaterialGroups, NestingResult


class NestingCache:
    """
    Simple LRU cache (manual) with a hard max size.
    Keeps the last few analyses, like a host app re-opening the same selection.
    """

    def __init__(self, max_items: int = DEFAULTS.default_cache_size):
        self.max_items = int(max_items)
        if self.max_items < 1:
            raise ValueError("max_items must be >= 1")
        self._store: Dict[str, NestingResult] = {}
        self._order: List[str] = []  # LRU order, oldest first
        self.hits = 0
        self.misses = 0

    @staticmethod
    def signature(groups: MaterialGroups, settings: NestSettings) -> str:
        h = hashlib.blake2b(digest_size=16)

        def feed(*vals) -> None:
            h.update(repr(vals).encode("utf-8"))
            h.update(b"\x00")

        feed("kerf", float(settings.kerf_width), "rot", bool(settings.allow_rotation))
        for material, entries in groups.items():
            w, hgt = settings.stock_size(material)
            feed("mat", material, w, hgt)
            for pt, qty in entries:
                feed(
                    pt.name,
                    float(pt.width),
                    float(pt.height),
                    float(pt.thickness),
                    pt.material,
                    (pt.grain_direction or "").lower(),
                    pt.edge_banding,
                    int(qty),
                )
        return h.hexdigest()

    def _touch(self, key: str) -> None:
        # Move key to the end (most recently used)
        try:
            self._order.remove(key)
        except ValueError:
            pass
        self._order.append(key)

    def get(self, groups: MaterialGroups, settings: NestSettings) -> Optional[NestingResult]:
        key = self.signature(groups, settings)
        res = self._store.get(key)
        if res is None:
            self.misses += 1
            return None
        self.hits += 1
        self._touch(key)
        return copy.deepcopy(res)

    def put(self, groups: MaterialGroups, settings: NestSettings, res: NestingResult) -> None:
        key = self.signature(groups, settings)
        self._store[key] = copy.deepcopy(res)
        self._touch(key)

        # Evict if needed
        while len(self._order) > self.max_items:
            old = self._order.pop(0)
            self._store.pop(old, None)

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: str) -> bool:
        return key in self._store

    def clear(self) -> None:
        self._store.clear()
        self._order.clear()

    def stats(self) -> Tuple[int, int]:
        """
        Returns (items_in_cache, max_items).
        """
        return (len(self._store), self.max_items)
