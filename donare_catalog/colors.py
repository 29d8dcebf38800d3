from __future__ import annotations

import io
import math
import os
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from PIL import Image

from .fetch import fetch_bytes
from .models import Variant
from .utils import logger

# Empirical cutoff in RGB units (max distance is ~441.7). Tune via
# images.color_distance_threshold in config.yaml.
COLOR_DISTANCE_THRESHOLD = 75.0

DEFAULT_PALETTE_SIZE = 5

_HEX = re.compile(r"^#[0-9A-Fa-f]{6}$")
_HEX_LOOSE = re.compile(r"^#?([0-9A-Fa-f]{2})([0-9A-Fa-f]{2})([0-9A-Fa-f]{2})$")

RGB = Tuple[int, int, int]


@dataclass(frozen=True)
class PredefinedColor:
    name: str
    hex: str


PREDEFINED_COLORS: List[PredefinedColor] = [
    PredefinedColor("VERMELHO", "#FF0000"),
    PredefinedColor("CACAU", "#5E2C04"),
    PredefinedColor("PALHA", "#E6D3A8"),
    PredefinedColor("BLACK", "#000000"),
    PredefinedColor("OFF WHITE", "#FAF9F6"),
    PredefinedColor("VERDE MILITAR", "#556B2F"),
    PredefinedColor("AZUL MARINHO", "#000080"),
    PredefinedColor("ROSA", "#FFC0CB"),
    PredefinedColor("ROSA BEBÊ", "#F4C2C2"),
    PredefinedColor("NUDE", "#E3BC9A"),
    PredefinedColor("AZUL ROYAL", "#4169E1"),
    PredefinedColor("CASTANHO", "#8B4513"),
    PredefinedColor("CHUMBO", "#36454F"),
    PredefinedColor("AZUL BEBÊ", "#89CFF0"),
    PredefinedColor("LARANJA", "#FFA500"),
    PredefinedColor("LEMON", "#FFFACD"),
]


@dataclass
class ColorMatch:
    variant: Variant
    distance: float


def find_predefined(name: str | None) -> Optional[PredefinedColor]:
    wanted = (name or "").strip().upper()
    for c in PREDEFINED_COLORS:
        if c.name == wanted:
            return c
    return None


def is_valid_hex(value: str | None) -> bool:
    return bool(value) and bool(_HEX.match(value))


def hex_to_rgb(value: str | None) -> Optional[RGB]:
    m = _HEX_LOOSE.match((value or "").strip())
    if not m:
        return None
    return int(m.group(1), 16), int(m.group(2), 16), int(m.group(3), 16)


def rgb_to_hex(r: int, g: int, b: int) -> str:
    return "#{:02x}{:02x}{:02x}".format(int(r), int(g), int(b))


def color_distance(a: RGB, b: RGB) -> float:
    dr = a[0] - b[0]
    dg = a[1] - b[1]
    db = a[2] - b[2]
    return math.sqrt(dr * dr + dg * dg + db * db)


def _open_image(image) -> Image.Image:
    if isinstance(image, Image.Image):
        return image
    if isinstance(image, (bytes, bytearray)):
        return Image.open(io.BytesIO(image))
    return Image.open(image)


def dominant_color(image, palette_size: int = DEFAULT_PALETTE_SIZE) -> Optional[str]:
    """Most populated entry of a median-cut palette, as #rrggbb.

    `image` may be a PIL image, raw bytes or a path. Returns None when the
    image cannot be decoded or quantized.
    """
    try:
        img = _open_image(image).convert("RGB")
        img.thumbnail((128, 128))
        q = img.quantize(colors=max(1, int(palette_size)), method=Image.Quantize.MEDIANCUT)
        palette = q.getpalette() or []
        counts = q.getcolors() or []
        if not counts:
            return None
        _, idx = max(counts, key=lambda c: c[0])
        r, g, b = palette[idx * 3: idx * 3 + 3]
        return rgb_to_hex(r, g, b)
    except Exception as e:
        logger.warning(f"dominant_color: could not analyse image ({type(e).__name__}: {e})")
        return None


def dominant_color_from_url(url: str, timeout: int = 20, palette_size: int = DEFAULT_PALETTE_SIZE) -> Optional[str]:
    try:
        if os.path.exists(url):
            data = url
        else:
            data = fetch_bytes(url, timeout=timeout)
    except Exception as e:
        logger.warning(f"dominant_color: could not load {url} ({type(e).__name__}: {e})")
        return None
    return dominant_color(data, palette_size=palette_size)


def nearest_variant(
    dominant_hex: str | None,
    variants: Iterable[Variant],
    threshold: float = COLOR_DISTANCE_THRESHOLD,
) -> Optional[ColorMatch]:
    rgb = hex_to_rgb(dominant_hex)
    if rgb is None:
        return None

    best: Optional[ColorMatch] = None
    for v in variants:
        v_rgb = hex_to_rgb(v.hex)
        if v_rgb is None:
            continue
        d = color_distance(rgb, v_rgb)
        # strict <, so on a tie the earlier variant stays
        if best is None or d < best.distance:
            best = ColorMatch(variant=v, distance=d)

    if best is not None and best.distance < threshold:
        return best
    return None
