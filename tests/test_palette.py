"""
Unit tests for palette formatting and export.
"""
import json

import pytest

from palette_extractor.services.colors.palette import (
    PaletteEntry, hex_to_rgb, palette_percentages, palette_to_json,
    palette_to_records, rgb_to_hex, write_palette_json
)


class TestHexFormatting:
    """Test #RRGGBB conversion"""

    def test_rgb_to_hex_basic_colors(self):
        assert rgb_to_hex((255, 0, 0)) == "#FF0000"
        assert rgb_to_hex((0, 255, 0)) == "#00FF00"
        assert rgb_to_hex((0, 0, 255)) == "#0000FF"
        assert rgb_to_hex((0, 0, 0)) == "#000000"
        assert rgb_to_hex((255, 255, 255)) == "#FFFFFF"

    def test_rgb_to_hex_uppercase_and_padding(self):
        assert rgb_to_hex((10, 171, 5)) == "#0AAB05"

    def test_round_trip_all_channel_values(self):
        """Each channel value 0-255 survives format and parse in every position"""
        for v in range(256):
            for rgb in ((v, 0, 0), (0, v, 0), (0, 0, v), (v, 255 - v, v // 2)):
                assert hex_to_rgb(rgb_to_hex(rgb)) == rgb

    def test_hex_to_rgb_accepts_lowercase_and_no_hash(self):
        assert hex_to_rgb("#1f4e79") == (31, 78, 121)
        assert hex_to_rgb("D3B58F") == (211, 181, 143)

    @pytest.mark.parametrize("bad", ["", "#FFF", "#GGGGGG", "#1234567", "red"])
    def test_hex_to_rgb_invalid(self, bad):
        with pytest.raises(ValueError):
            hex_to_rgb(bad)

    def test_rgb_to_hex_out_of_range(self):
        with pytest.raises(ValueError):
            rgb_to_hex((256, 0, 0))

    def test_entry_hex_property(self):
        assert PaletteEntry((31, 78, 121), 4).hex == "#1F4E79"


class TestPercentages:
    """Test share-of-total rounding"""

    def test_one_decimal(self):
        entries = [PaletteEntry((0, 0, 0), 2), PaletteEntry((1, 1, 1), 1)]
        assert palette_percentages(entries) == [66.7, 33.3]

    def test_zero_total(self):
        assert palette_percentages([PaletteEntry((0, 0, 0), 0)]) == [0.0]


class TestExport:
    """Test palette.json serialization"""

    @pytest.fixture
    def entries(self):
        return [PaletteEntry((255, 0, 0), 2), PaletteEntry((0, 255, 0), 1)]

    def test_records(self, entries):
        assert palette_to_records(entries) == [
            {"hex": "#FF0000", "rgb": [255, 0, 0], "count": 2},
            {"hex": "#00FF00", "rgb": [0, 255, 0], "count": 1},
        ]

    def test_json_is_pretty_printed(self, entries):
        payload = palette_to_json(entries)
        assert payload.startswith("[\n  {")
        assert json.loads(payload) == palette_to_records(entries)

    def test_empty_palette(self):
        with pytest.raises(ValueError, match="No palette"):
            palette_to_json([])

    def test_write_palette_json(self, entries, tmp_path):
        path = write_palette_json(entries, tmp_path)
        assert path.name == "palette.json"
        assert json.loads(path.read_text(encoding="utf-8"))[0]["hex"] == "#FF0000"
