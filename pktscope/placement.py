"""Persisting window placement and checking it fits on the screen."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

_FIELDS = ("Left", "Top", "Right", "Bottom")
_DWORD = 0xFFFFFFFF


def _to_dword(value: int) -> int:
    return value & _DWORD


def _to_int(value: int) -> int:
    value &= _DWORD
    return value - (1 << 32) if value & 0x80000000 else value


@dataclass(frozen=True)
class Rect:
    """A rectangle with exclusive right and bottom edges."""

    left: int
    top: int
    right: int
    bottom: int

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def intersection(self, other: "Rect") -> Optional["Rect"]:
        """The overlap of two rectangles, or None when they do not overlap."""
        result = Rect(
            max(self.left, other.left),
            max(self.top, other.top),
            min(self.right, other.right),
            min(self.bottom, other.bottom),
        )
        return None if result.is_empty else result


def _area(rect: Optional[Rect]) -> int:
    return 0 if rect is None else rect.width * rect.height


def is_position_valid(
    x: int, y: int, width: int, height: int, work_areas: Iterable[Rect]
) -> bool:
    """True when at least half the window lies inside one monitor's work area."""
    if width <= 0 or height <= 0:
        return False
    window = Rect(x, y, x + width, y + height)
    best: Optional[Rect] = None
    for area in work_areas:
        overlap = window.intersection(area)
        if overlap is not None and _area(overlap) > _area(best):
            best = overlap
    if best is None:
        return False
    return best.width >= width // 2 and best.height >= height // 2


class PositionStore:
    """Window rectangles kept by key in a JSON file."""

    def __init__(self, path) -> None:
        self.path = Path(path)

    def _read(self) -> dict:
        try:
            with self.path.open("r", encoding="utf-8") as stream:
                data = json.load(stream)
        except (OSError, ValueError):
            return {}
        return data if isinstance(data, dict) else {}

    def save(self, key: str, rect: Rect) -> None:
        """Store a rectangle under the given key."""
        data = self._read()
        data[key] = {
            name: _to_dword(value)
            for name, value in zip(_FIELDS, (rect.left, rect.top, rect.right, rect.bottom))
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        with tmp.open("w", encoding="utf-8") as stream:
            json.dump(data, stream, indent=2, sort_keys=True)
        os.replace(tmp, self.path)

    def load(self, key: str, work_areas: Iterable[Rect]) -> Optional[Rect]:
        """The stored rectangle, or None if missing or not visible enough."""
        entry = self._read().get(key)
        if not isinstance(entry, dict):
            return None
        try:
            left, top, right, bottom = (int(entry[name]) for name in _FIELDS)
        except (KeyError, TypeError, ValueError):
            return None
        x = _to_int(left)
        y = _to_int(top)
        width = _to_int(right - left)
        height = _to_int(bottom - top)
        if not is_position_valid(x, y, width, height, list(work_areas)):
            return None
        return Rect(x, y, x + width, y + height)