# sheet_nester/config.py
# Centralized defaults and configuration helpers.
# Keeps "magic numbers" (default sheet, kerf, progress steps) in one place,
# resolves per-material stock sizes and persists global user settings as JSON.

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

from .logger import get_logger


@dataclass(frozen=True)
class Defaults:
    # Standard 8x4 ft sheet in mm
    default_sheet_w: float = 2440.0
    default_sheet_h: float = 1220.0

    # Typical panel saw kerf (mm)
    default_kerf: float = 3.0
    default_allow_rotation: bool = True

    # Reporting
    default_currency: str = "USD"
    default_units: str = "mm"
    default_precision: int = 1

    # How many nesting results a NestingCache keeps
    default_cache_size: int = 3

    # Progress granularity
    progress_prepare_every: int = 50
    progress_place_every: int = 20


DEFAULTS = Defaults()

CONFIG_ENV_VAR = "SHEET_NESTER_CONFIG"


@dataclass(frozen=True)
class StockMaterial:
    """Stock sheet for one material."""
    width: float
    height: float
    price: float = 0.0
    currency: Optional[str] = None

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Invalid stock size: {self.width}x{self.height}")


def parse_stock_entry(entry: Any) -> Optional[StockMaterial]:
    """
    Accepts {"width", "height", "price", "currency"} or [w, h].
    Returns None for shapes we don't understand (caller falls back to the default sheet).
    """
    if isinstance(entry, StockMaterial):
        return entry
    if isinstance(entry, dict):
        if "width" not in entry or "height" not in entry:
            return None
        return StockMaterial(
            width=float(entry["width"]),
            height=float(entry["height"]),
            price=float(entry.get("price") or 0.0),
            currency=entry.get("currency"),
        )
    if isinstance(entry, (list, tuple)) and len(entry) == 2:
        return StockMaterial(width=float(entry[0]), height=float(entry[1]))
    return None


_TRUE_TEXT = ("true", "yes", "on", "1")
_FALSE_TEXT = ("false", "no", "off", "0")


def parse_flag(value: Any, name: str = "flag") -> bool:
    """
    Strict boolean parsing for settings coming from JSON, CSV or a host app.
    Accepts bools, 0/1 and "true"/"false"/"yes"/"no"/"on"/"off" (any case).
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        s = value.strip().lower()
        if s in _TRUE_TEXT:
            return True
        if s in _FALSE_TEXT:
            return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


def _parse_int(value: Any, default: int, name: str) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


def _parse_float(value: Any, default: float, name: str) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got {value!r}") from None


@dataclass
class NestSettings:
    stock_materials: Dict[str, Any] = field(default_factory=dict)
    kerf_width: float = DEFAULTS.default_kerf
    allow_rotation: bool = DEFAULTS.default_allow_rotation
    default_currency: str = DEFAULTS.default_currency
    units: str = DEFAULTS.default_units
    precision: int = DEFAULTS.default_precision

    def __post_init__(self):
        self.kerf_width = float(self.kerf_width)
        if self.kerf_width < 0:
            raise ValueError(f"kerf_width must be >= 0, got {self.kerf_width}")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "NestSettings":
        data = data or {}
        kerf = data.get("kerf_width")
        allow = data.get("allow_rotation")
        return cls(
            stock_materials=dict(data.get("stock_materials") or {}),
            kerf_width=_parse_float(kerf, DEFAULTS.default_kerf, "kerf_width"),
            allow_rotation=DEFAULTS.default_allow_rotation if allow is None else parse_flag(allow, "allow_rotation"),
            default_currency=str(data.get("default_currency") or DEFAULTS.default_currency),
            units=str(data.get("units") or DEFAULTS.default_units),
            precision=_parse_int(data.get("precision"), DEFAULTS.default_precision, "precision"),
        )

    def stock_for(self, material: str) -> Optional[StockMaterial]:
        return parse_stock_entry(self.stock_materials.get(material))

    def stock_size(self, material: str) -> Tuple[float, float]:
        """Stock (width, height) for a material; default sheet if unknown."""
        stock = self.stock_for(material)
        if stock is None:
            get_logger().debug(f"Using default sheet size for material: {material}")
            return DEFAULTS.default_sheet_w, DEFAULTS.default_sheet_h
        return stock.width, stock.height

    def stock_price(self, material: str) -> Tuple[float, str]:
        stock = self.stock_for(material)
        if stock is None:
            return 0.0, self.default_currency
        return stock.price, stock.currency or self.default_currency

    def with_stock_fallback(self, stock_materials: Optional[Dict[str, Any]]) -> "NestSettings":
        """Copy whose stock table falls back to `stock_materials` for materials it doesn't list."""
        merged = dict(stock_materials or {})
        merged.update(self.stock_materials)
        return replace(self, stock_materials=merged)

    def with_default_sheet(self, materials: Iterable[str], width: float, height: float) -> "NestSettings":
        """Copy that gives every listed material without a stock entry a width x height sheet."""
        merged = dict(self.stock_materials)
        for m in materials:
            if parse_stock_entry(merged.get(m)) is None:
                merged[m] = [float(width), float(height)]
        return replace(self, stock_materials=merged)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stock_materials": self.stock_materials,
            "kerf_width": self.kerf_width,
            "allow_rotation": self.allow_rotation,
            "default_currency": self.default_currency,
            "units": self.units,
            "precision": self.precision,
        }


def parse_board_text(board_text: str) -> Tuple[float, float]:
    """
    Parse '2440x1220' -> (2440.0, 1220.0)
    """
    s = board_text.lower().replace(" ", "")
    if "x" not in s:
        raise ValueError("board_text must be like '2440x1220'")
    a, b = s.split("x", 1)
    return float(a), float(b)


# ----------------------------
# Persisted global settings
# ----------------------------

_cached_settings: Optional[Dict[str, Any]] = None


def config_file() -> Path:
    env = os.environ.get(CONFIG_ENV_VAR)
    if env:
        return Path(env)
    return Path.home() / ".sheet_nester" / "config.json"


def load_global_settings(path: Optional[Path] = None) -> Dict[str, Any]:
    path = Path(path) if path is not None else config_file()
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        get_logger().warn(f"Config file '{path}' is corrupted. Resetting to default. Error: {e}")
        return {}
    if not isinstance(data, dict):
        get_logger().warn(f"Config file '{path}' does not hold an object. Resetting to default.")
        return {}
    return data


def save_global_settings(new_settings: Dict[str, Any], path: Optional[Path] = None) -> Dict[str, Any]:
    """Merge new_settings into the stored file and refresh the cache."""
    global _cached_settings
    path = Path(path) if path is not None else config_file()
    path.parent.mkdir(parents=True, exist_ok=True)
    merged = load_global_settings(path)
    merged.update(new_settings)
    with path.open("w", encoding="utf-8") as f:
        json.dump(merged, f, ensure_ascii=False, indent=2)
    _cached_settings = merged
    return merged


def get_cached_settings() -> Dict[str, Any]:
    global _cached_settings
    if _cached_settings is None:
        _cached_settings = load_global_settings()
    return _cached_settings


def clear_cached_settings() -> None:
    global _cached_settings
    _cached_settings = None
