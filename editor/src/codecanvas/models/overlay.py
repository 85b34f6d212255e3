"""
CodeCanvas - Overlay records

Text and image layers drawn above the base code image. Overlays are plain
data: geometry (position, rotation, size) plus kind-specific style. They carry
no behaviour beyond keeping sizes above the minimum.

Geometry conventions:
- position is the logical-space anchor. Image overlays are centred on it;
  text overlays put their baseline on it, shifted horizontally by alignment.
- rotation is in degrees, clockwise on screen, 0 = unrotated.
"""

import uuid as uuid_module
from dataclasses import dataclass, field
from typing import ClassVar, Optional

from PIL import ImageColor

from .transform import Vec2
from ..constants import (
    DEFAULT_TEXT, DEFAULT_TEXT_COLOR, DEFAULT_FONT_SIZE, DEFAULT_FONT_FAMILY,
    DEFAULT_FONT_WEIGHT, DEFAULT_FONT_STYLE, DEFAULT_TEXT_ALIGN,
    DEFAULT_IMAGE_WIDTH, DEFAULT_ROTATION,
    FONT_WEIGHTS, FONT_STYLES, TEXT_ALIGNMENTS,
    MIN_OVERLAY_SIZE, MIN_FONT_SIZE
)


def new_overlay_id():
    """Generate a fresh overlay id. Ids are never reused."""
    return uuid_module.uuid4().hex


@dataclass(frozen=True)
class FontSpec:
    """Everything needed to pick a concrete font."""
    family: str
    size: float
    weight: str = 'normal'
    style: str = 'normal'

    def scaled(self, factor):
        return FontSpec(self.family, self.size * factor, self.weight, self.style)


@dataclass
class Overlay:
    """Base overlay record shared by text and image layers."""
    kind: ClassVar[str] = ''

    position: Vec2
    rotation: float = DEFAULT_ROTATION
    id: str = field(default_factory=new_overlay_id)

    def __post_init__(self):
        if not isinstance(self.position, Vec2):
            self.position = Vec2(*self.position)
        self.rotation = float(self.rotation)
        self.clamp_size()

    def clamp_size(self):
        """Keep size fields at or above their minimum. Overridden per kind."""


@dataclass
class TextOverlay(Overlay):
    """Text layer. Extents come from measuring the text with its font."""
    kind: ClassVar[str] = 'text'

    text: str = DEFAULT_TEXT
    font_size: float = DEFAULT_FONT_SIZE
    color: str = DEFAULT_TEXT_COLOR
    font_family: str = DEFAULT_FONT_FAMILY
    font_weight: str = DEFAULT_FONT_WEIGHT
    font_style: str = DEFAULT_FONT_STYLE
    text_align: str = DEFAULT_TEXT_ALIGN

    def __post_init__(self):
        if self.font_weight not in FONT_WEIGHTS:
            raise ValueError(f"font_weight must be one of {FONT_WEIGHTS}, got {self.font_weight!r}")
        if self.font_style not in FONT_STYLES:
            raise ValueError(f"font_style must be one of {FONT_STYLES}, got {self.font_style!r}")
        if self.text_align not in TEXT_ALIGNMENTS:
            raise ValueError(f"text_align must be one of {TEXT_ALIGNMENTS}, got {self.text_align!r}")
        # Raises ValueError for anything Pillow cannot paint with
        ImageColor.getrgb(self.color)
        super().__post_init__()

    def clamp_size(self):
        self.font_size = max(MIN_FONT_SIZE, float(self.font_size))

    @property
    def font_spec(self):
        return FontSpec(self.font_family, self.font_size, self.font_weight, self.font_style)


@dataclass
class ImageOverlay(Overlay):
    """Image layer backed by an immutable decoded bitmap.

    The bitmap and its natural size are fixed at creation; width/height are
    the displayed size in logical units.
    """
    kind: ClassVar[str] = 'image'

    bitmap: Optional[object] = None
    natural_width: int = 1
    natural_height: int = 1
    width: float = DEFAULT_IMAGE_WIDTH
    height: float = DEFAULT_IMAGE_WIDTH
    name: str = ''

    def clamp_size(self):
        self.width = max(MIN_OVERLAY_SIZE, float(self.width))
        self.height = max(MIN_OVERLAY_SIZE, float(self.height))

    @property
    def aspect_ratio(self):
        """Natural height / width of the source bitmap."""
        return self.natural_height / self.natural_width
