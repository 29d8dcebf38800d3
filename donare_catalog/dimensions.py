from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

DEFAULT_UNIT = "cm"
UNITS = ("cm", "mm", "m", "in", "ft")

# "L: 10cm, A: 20cm, P: 5cm"
_LABELED = re.compile(
    r"L:\s*([\d.]+)(\w*),\s*A:\s*([\d.]+)(\w*),\s*P:\s*([\d.]+)(\w*)", re.IGNORECASE
)
# "10x20x5 cm", "10cm x 20cm x 5cm"
_SEPARATED = re.compile(
    r"([\d.]+)(\w*)\s*x\s*([\d.]+)(\w*)\s*x\s*([\d.]+)(\w*)(?:\s+(cm|mm|m|in|ft)\b)?",
    re.IGNORECASE,
)
_NUMBER = re.compile(r"^\d+(?:\.\d+)?$|^\.\d+$")


@dataclass
class Dimensions:
    width: Optional[str] = None
    height: Optional[str] = None
    depth: Optional[str] = None
    unit: str = DEFAULT_UNIT

    def is_complete(self) -> bool:
        return bool(self.width and self.height and self.depth and self.unit)


def _from_groups(m: re.Match) -> Dimensions:
    trailing = m.group(7) if m.re.groups >= 7 and m.group(7) else ""
    return Dimensions(
        width=m.group(1),
        height=m.group(3),
        depth=m.group(5),
        unit=(m.group(2) or m.group(4) or m.group(6) or trailing or DEFAULT_UNIT).lower(),
    )


def _parse_loose(text: str) -> Dimensions:
    parts = [p for p in text.replace(",", "").split() if p]
    unit = DEFAULT_UNIT
    if parts and parts[-1].lower() in UNITS:
        unit = parts.pop().lower()

    numbers = [p for p in parts if _NUMBER.match(p)]
    if len(numbers) >= 3:
        return Dimensions(width=numbers[0], height=numbers[1], depth=numbers[2], unit=unit)
    return Dimensions()


def parse_dimensions(text: str | None) -> Dimensions:
    """Free-text size -> Dimensions. Never raises; unknown input yields only the default unit."""
    if not text or not text.strip():
        return Dimensions()

    m = _LABELED.search(text)
    if m:
        return _from_groups(m)

    m = _SEPARATED.search(text)
    if m:
        return _from_groups(m)

    return _parse_loose(text)


def format_dimensions(width, height, depth, unit: str = DEFAULT_UNIT) -> str:
    if not (width and height and depth and unit):
        return ""
    return f"L: {width}{unit}, A: {height}{unit}, P: {depth}{unit}"
