"""
Compositor - draws the base raster and overlays onto a new surface

Used identically for the live preview and for export. Every length, radius
and position handed to a draw call is a logical value multiplied by exactly
one target_scale, so a render at scale k is the scale-1 render, only
sharper: overlays never drift relative to the base raster.

Overlays are rasterised upright into a sprite and mapped onto the surface with
a single affine transform (rotation + translation, sub-pixel exact).
"""

import math
import logging

from PIL import Image, ImageDraw

from ..components.transform_widgets import SELECTION_MODE, HandleGeometry, overlay_frame
from ..utils.coordinate_transforms import to_world
from ..constants import (
    HANDLE_RADIUS, ROTATE_LEADER_LENGTH, SELECTION_STROKE_WIDTH, DEFAULT_BACKGROUND_COLOR
)
from .font_service import ALIGN_ANCHORS

logger = logging.getLogger(__name__)

# Transparent margin around text sprites so antialiased edges survive resampling
TEXT_SPRITE_PADDING = 2


def surface_size(logical_size, target_scale):
    """Pixel size of a surface for a logical size at a scale."""
    width, height = logical_size
    return (max(1, int(round(width * target_scale))),
            max(1, int(round(height * target_scale))))


class Compositor:
    """Renders base raster + ordered overlays at a caller-chosen scale."""

    def __init__(self, fonts, handle_radius=HANDLE_RADIUS, leader_length=ROTATE_LEADER_LENGTH,
                 stroke_width=SELECTION_STROKE_WIDTH, background=DEFAULT_BACKGROUND_COLOR):
        self.fonts = fonts
        self.handle_radius = handle_radius
        self.leader_length = leader_length
        self.stroke_width = stroke_width
        self.background = tuple(background)

    def render(self, base_raster, layers, selection, logical_size, target_scale):
        """Render a full frame.

        Args:
            base_raster: PIL image from the code encoder, or None when the
                encoder rejected the content (overlays still render on a
                cleared surface)
            layers: Overlays, bottom to top
            selection: Selection to decorate, or None (always None for export)
            logical_size: (width, height) in logical units
            target_scale: Surface pixels per logical unit

        Returns:
            PIL.Image in RGBA mode, sized logical_size * target_scale
        """
        if target_scale <= 0:
            raise ValueError(f"target_scale must be positive, got {target_scale}")

        size = surface_size(logical_size, target_scale)
        surface = Image.new('RGBA', size, self.background)

        if base_raster is not None:
            base = base_raster if base_raster.mode == 'RGBA' else base_raster.convert('RGBA')
            if base.size != size:
                base = base.resize(size, Image.Resampling.LANCZOS)
            surface.alpha_composite(base)

        for overlay in layers:
            layer = self._render_overlay(overlay, size, target_scale)
            if layer is not None:
                surface.alpha_composite(layer)
            if selection is not None and selection.overlay_id == overlay.id:
                self._draw_decorations(surface, overlay, target_scale)

        return surface

    # ========================================
    # Overlay content
    # ========================================

    def _render_overlay(self, overlay, size, scale):
        if overlay.kind == 'image':
            return self._render_image(overlay, size, scale)
        return self._render_text(overlay, size, scale)

    def _render_image(self, overlay, size, scale):
        if overlay.bitmap is None:
            return None
        sprite_w = max(1, int(round(overlay.width * scale)))
        sprite_h = max(1, int(round(overlay.height * scale)))
        sprite = overlay.bitmap.resize((sprite_w, sprite_h), Image.Resampling.LANCZOS)

        # Sprite pixels per surface pixel (absorbs the rounding above)
        fx = sprite_w / (overlay.width * scale)
        fy = sprite_h / (overlay.height * scale)
        return self._place(sprite, size, overlay, scale, sprite_w / 2, sprite_h / 2, fx, fy)

    def _render_text(self, overlay, size, scale):
        if not overlay.text:
            return None
        font = self.fonts.get_font(overlay.font_spec.scaled(scale))
        anchor = ALIGN_ANCHORS[overlay.text_align]

        left, top, right, bottom = font.getbbox(overlay.text, anchor=anchor)
        pad = TEXT_SPRITE_PADDING
        sprite_w = int(math.ceil(right - left)) + 2 * pad
        sprite_h = int(math.ceil(bottom - top)) + 2 * pad
        origin_x = -left + pad
        origin_y = -top + pad

        sprite = Image.new('RGBA', (sprite_w, sprite_h), (0, 0, 0, 0))
        ImageDraw.Draw(sprite).text((origin_x, origin_y), overlay.text, font=font,
                                    fill=overlay.color, anchor=anchor)
        return self._place(sprite, size, overlay, scale, origin_x, origin_y, 1.0, 1.0)

    def _place(self, sprite, size, overlay, scale, origin_x, origin_y, fx, fy):
        """Map an upright sprite onto a surface-sized layer.

        The sprite pixel (origin_x, origin_y) lands on position * scale and
        the sprite is rotated about it by the overlay rotation.

        Args:
            sprite: Upright RGBA sprite
            size: Surface (width, height)
            overlay: Overlay supplying position and rotation
            scale: Surface pixels per logical unit
            origin_x, origin_y: Sprite pixel of the overlay's local origin
            fx, fy: Sprite pixels per surface pixel along local x/y
        """
        cx = overlay.position.x * scale
        cy = overlay.position.y * scale
        rad = math.radians(overlay.rotation)
        cos_r = math.cos(rad)
        sin_r = math.sin(rad)

        # Inverse mapping: surface pixel -> local (rotate by -rotation) -> sprite pixel
        coeffs = (
            fx * cos_r, fx * sin_r, fx * (-cos_r * cx - sin_r * cy) + origin_x,
            -fy * sin_r, fy * cos_r, fy * (sin_r * cx - cos_r * cy) + origin_y,
        )
        return sprite.transform(size, Image.Transform.AFFINE, coeffs,
                                resample=Image.Resampling.BICUBIC)

    # ========================================
    # Selection decorations
    # ========================================

    def _draw_decorations(self, surface, overlay, scale):
        """Bounding box, rotate leader + handle and resize handle of the selection."""
        frame = overlay_frame(overlay, self.fonts)
        geometry = HandleGeometry(self.handle_radius, self.leader_length)
        stroke = max(1, int(round(self.stroke_width * scale)))

        def to_surface(local):
            world = to_world(local, overlay.position, overlay.rotation)
            return (world.x * scale, world.y * scale)

        draw = ImageDraw.Draw(surface)
        for handle in SELECTION_MODE.get_decorations():
            handle.draw(draw, to_surface, frame, geometry, scale, stroke)
