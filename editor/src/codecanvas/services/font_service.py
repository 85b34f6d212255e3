"""Font resolution and text measurement.

Resolves a FontSpec to a Pillow FreeType font and measures text with it.
The same fonts are used for hit-testing text overlays and for painting them,
so the hit box always matches the painted glyphs.
"""

import os
import logging
from dataclasses import dataclass

from PIL import ImageFont

logger = logging.getLogger(__name__)

# (weight, style) -> file name suffixes to try, most specific first
_STYLE_SUFFIXES = {
    ('normal', 'normal'): ['', '-Regular'],
    ('bold', 'normal'): ['-Bold', 'Bold', '-bold'],
    ('normal', 'italic'): ['-Italic', '-Oblique', 'Italic', '-italic'],
    ('bold', 'italic'): ['-BoldItalic', '-BoldOblique', 'BoldItalic', '-bolditalic'],
}

FONT_EXTENSIONS = ('.ttf', '.otf')

# Text anchor per alignment: horizontal origin, baseline vertical origin
ALIGN_ANCHORS = {
    'left': 'ls',
    'center': 'ms',
    'right': 'rs',
}


@dataclass(frozen=True)
class TextMetrics:
    """Measured extents of a text run, relative to its baseline origin."""
    width: float
    ascent: float   # distance above the baseline
    descent: float  # distance below the baseline

    @property
    def height(self):
        return self.ascent + self.descent


class FontService:
    """Caches fonts per spec and answers text metric queries."""

    def __init__(self, font_dirs=None):
        """
        Args:
            font_dirs: Extra directories searched before the system font path
        """
        self.font_dirs = list(font_dirs or [])
        self._cache = {}

    def _candidate_files(self, spec):
        """File names to try for a spec, e.g. DejaVuSans-Bold.ttf"""
        suffixes = _STYLE_SUFFIXES.get((spec.weight, spec.style), [''])
        names = []
        for family in (spec.family, spec.family.replace(' ', '')):
            for suffix in suffixes:
                for ext in FONT_EXTENSIONS:
                    name = f"{family}{suffix}{ext}"
                    if name not in names:
                        names.append(name)
        return names

    def _load(self, spec):
        for name in self._candidate_files(spec):
            for font_dir in self.font_dirs:
                path = os.path.join(font_dir, name)
                if os.path.isfile(path):
                    return ImageFont.truetype(path, spec.size)
            # Bare name: Pillow searches the platform font directories
            try:
                return ImageFont.truetype(name, spec.size)
            except OSError:
                continue

        logger.debug("No font file for %s, using bundled default", spec)
        return ImageFont.load_default(size=spec.size)

    def get_font(self, spec):
        """Return a FreeType font for the spec (cached)."""
        key = (spec.family, round(spec.size, 4), spec.weight, spec.style)
        font = self._cache.get(key)
        if font is None:
            font = self._load(spec)
            self._cache[key] = font
        return font

    def measure(self, spec, text):
        """Measure a single line of text.

        Returns:
            TextMetrics with the advance width and the ink ascent/descent
            around the baseline
        """
        if not text:
            return TextMetrics(0.0, 0.0, 0.0)
        font = self.get_font(spec)
        _, top, _, bottom = font.getbbox(text, anchor='ls')
        return TextMetrics(float(font.getlength(text)), float(-top), float(bottom))
