"""
Palette entries and their output formats.

Hex formatting, share percentages and the ``palette.json`` export used by the
API layer.
"""

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Sequence, Tuple, Union

from loguru import logger

from palette_extractor.config import config

RGB = Tuple[int, int, int]

HEX_RE = re.compile(r"^#?([0-9A-Fa-f]{6})$")


def rgb_to_hex(rgb: Sequence[int]) -> str:
    """Convert an RGB triple to an uppercase ``#RRGGBB`` string."""
    r, g, b = [int(x) for x in rgb]
    for channel in (r, g, b):
        if not 0 <= channel <= 255:
            raise ValueError(f"Channel out of range 0-255: {channel}")
    return f"#{r:02X}{g:02X}{b:02X}"


def hex_to_rgb(hex_color: str) -> RGB:
    """Parse ``#RRGGBB`` (case-insensitive, ``#`` optional) into an RGB tuple."""
    match = HEX_RE.match(hex_color.strip())
    if match is None:
        raise ValueError(f"Invalid hex color: {hex_color!r}")
    digits = match.group(1)
    return tuple(int(digits[i:i+2], 16) for i in (0, 2, 4))


@dataclass(frozen=True)
class PaletteEntry:
    """A cluster centroid color and the number of samples assigned to it."""
    color: RGB
    count: int

    @property
    def hex(self) -> str:
        return rgb_to_hex(self.color)


def palette_percentages(entries: Sequence[PaletteEntry]) -> List[float]:
    """
    Share of each entry in the total sample count, in percent.

    Rounded to one decimal place, half-up. An all-zero palette yields zeros.
    """
    total = sum(entry.count for entry in entries) or 1
    return [int(entry.count / total * 1000 + 0.5) / 10 for entry in entries]


def palette_to_records(entries: Sequence[PaletteEntry]) -> List[Dict]:
    """Serialize entries to ``{hex, rgb, count}`` dicts."""
    return [
        {"hex": entry.hex, "rgb": list(entry.color), "count": entry.count}
        for entry in entries
    ]


def palette_to_json(entries: Sequence[PaletteEntry]) -> str:
    """Pretty-printed JSON array of palette records."""
    if not entries:
        raise ValueError("No palette to download")
    return json.dumps(palette_to_records(entries), indent=2)


def write_palette_json(entries: Sequence[PaletteEntry], directory: Union[str, Path]) -> Path:
    """
    Write the palette as ``palette.json`` inside ``directory``.

    Returns:
        Path of the written file
    """
    payload = palette_to_json(entries)
    path = Path(directory) / config.EXPORT_FILENAME
    path.write_text(payload, encoding="utf-8")
    logger.info(f"Wrote {len(entries)} palette entries to {path}")
    return path
