# sheet_nester/logger.py
# Lightweight logging utilities for the nester.
# Allows you to turn on/off detailed nesting diagnostics without polluting stdout.

from __future__ import annotations

import sys
from dataclasses import dataclass


@dataclass
class Logger:
    enabled: bool = True
    debug_enabled: bool = False
    prefix: str = "[NEST]"

    def info(self, msg: str) -> None:
        if self.enabled:
            print(f"{self.prefix} {msg}", file=sys.stdout)

    def debug(self, msg: str) -> None:
        if self.enabled and self.debug_enabled:
            print(f"{self.prefix} DEBUG: {msg}", file=sys.stdout)

    def warn(self, msg: str) -> None:
        if self.enabled:
            print(f"{self.prefix} WARNING: {msg}", file=sys.stderr)

    def error(self, msg: str) -> None:
        print(f"{self.prefix} ERROR: {msg}", file=sys.stderr)


# Global default logger
LOGGER = Logger(enabled=True)


def set_enabled(flag: bool) -> None:
    LOGGER.enabled = bool(flag)


def set_debug(flag: bool) -> None:
    LOGGER.debug_enabled = bool(flag)


def get_logger() -> Logger:
    return LOGGER
