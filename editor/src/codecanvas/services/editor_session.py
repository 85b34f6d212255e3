"""
Editor Session - owns everything one editing session works on

The session is the single object the UI talks to. It owns:
- the LayerModel (overlays, bottom to top)
- the selection (at most one overlay)
- the base raster handed in by the code encoder
- the DragController turning pointer events into geometry edits

and exposes the preview/export renders. The code encoder itself is an
external collaborator: callers encode content and pass the resulting bitmap
to set_base_raster(), or call set_base_invalid() when the encoder rejects
the content.

Usage:
    session = EditorSession(config)
    session.set_base_raster(qr_image)
    overlay = session.add_text_overlay("Scan me")
    session.canvas_rect = CanvasRect(0, 0, 600, 600, 600, 600)
    session.on_pointer_down(300, 300)
    session.on_pointer_move(340, 310)
    session.on_pointer_up(340, 310)
    png_bytes = session.render_export(1024, 'png')
"""

import logging

from ..config import EditorConfig
from ..constants import DEFAULT_TEXT, DEFAULT_IMAGE_WIDTH
from ..errors import ExportRejectedError
from ..models.layers import LayerModel, EVENT_REMOVED
from ..models.overlay import TextOverlay, ImageOverlay
from ..models.transform import Vec2
from ..models.drag_context import (
    Selection, PointerEvent, POINTER_DOWN, POINTER_MOVE, POINTER_UP, POINTER_CANCEL
)
from ..utils.coordinate_transforms import to_logical
from .compositor import Compositor
from .drag_controller import DragController
from .exporter import normalize_format, is_vector_format, export_scale, encode_image
from .font_service import FontService
from .frame_scheduler import ManualFrameScheduler
from .hit_tester import hit_test
from .image_decoder import decode_image

logger = logging.getLogger(__name__)


class EditorSession:
    """Layer model + selection + drag state for one editing session."""

    def __init__(self, config=None, scheduler=None, fonts=None, vector_source=None):
        """
        Args:
            config: EditorConfig (defaults if None)
            scheduler: FrameScheduler for drag coalescing (manual if None)
            fonts: FontService (built from config.font_dirs if None)
            vector_source: Optional callable(size) -> bytes producing a
                vector rendition of the bare code, used for SVG export
        """
        self.config = config or EditorConfig()
        self.fonts = fonts or FontService(self.config.font_dirs)
        self.layers = LayerModel()
        self.selection = None
        self.scheduler = scheduler or ManualFrameScheduler()
        self.controller = DragController(self, self.scheduler)
        self.compositor = Compositor(
            self.fonts,
            handle_radius=self.config.handle_radius,
            leader_length=self.config.leader_length,
            stroke_width=self.config.stroke_width,
            background=self.config.background_color,
        )
        self.vector_source = vector_source

        self.base_raster = None
        self.content_valid = False

        # On-screen placement of the preview, set by the view
        self.canvas_rect = None
        self.preview_scale = self.config.preview_scale

        self._selection_observers = []
        self.layers.subscribe(self._on_layers_changed)

    @property
    def logical_size(self):
        return self.config.logical_size

    @property
    def logical_center(self):
        width, height = self.logical_size
        return Vec2(width / 2, height / 2)

    # ========================================
    # Base raster
    # ========================================

    def set_base_raster(self, image):
        """Use an encoder result as the base image. None marks the content invalid."""
        if image is None:
            self.set_base_invalid()
            return
        self.base_raster = image
        self.content_valid = True

    def set_base_invalid(self):
        """The encoder rejected the content: overlays render on a cleared base."""
        self.base_raster = None
        self.content_valid = False
        logger.info("Base raster unavailable, rendering overlays on a blank base")

    # ========================================
    # Selection
    # ========================================

    def subscribe_selection(self, callback):
        """Register callback(selection), called whenever the selection changes."""
        if callback not in self._selection_observers:
            self._selection_observers.append(callback)

    def _set_selection(self, selection):
        if selection == self.selection:
            return
        self.selection = selection
        for callback in list(self._selection_observers):
            callback(selection)

    def select(self, overlay_id):
        """Select an overlay. Unknown ids are ignored."""
        overlay = self.layers.get(overlay_id)
        if overlay is None:
            logger.debug("Select ignored, unknown overlay %s", overlay_id)
            return False
        self._set_selection(Selection(overlay.id, overlay.kind))
        return True

    def clear_selection(self):
        self._set_selection(None)

    @property
    def selected_overlay(self):
        if self.selection is None:
            return None
        return self.layers.get(self.selection.overlay_id)

    def _on_layers_changed(self, event, overlay_id):
        if event != EVENT_REMOVED:
            return
        self.controller.overlay_removed(overlay_id)
        if self.selection is not None and self.selection.overlay_id == overlay_id:
            self.clear_selection()

    # ========================================
    # Overlay lifecycle
    # ========================================

    def add_text_overlay(self, text=DEFAULT_TEXT, **style):
        """Add a text overlay centred in the canvas and select it.

        Args:
            text: Text content
            **style: TextOverlay fields (font_size, color, text_align, ...)

        Returns:
            The new TextOverlay
        """
        style.setdefault('font_family', self.config.font_family)
        style.setdefault('position', self.logical_center)
        overlay = TextOverlay(text=text, **style)
        self.layers.append(overlay)
        self.select(overlay.id)
        return overlay

    def add_image_overlay(self, data, name='', width=DEFAULT_IMAGE_WIDTH, position=None):
        """Decode image bytes and add them as an overlay centred in the canvas.

        Args:
            data: Image file bytes
            name: Display name (usually the file name)
            width: Initial width in logical units; height follows the aspect
            position: Vec2 centre (canvas centre if None)

        Returns:
            The new ImageOverlay

        Raises:
            ImageDecodeError: If the bytes cannot be decoded (model unchanged)
        """
        decoded = decode_image(data)
        overlay = ImageOverlay(
            position=self.logical_center if position is None else position,
            bitmap=decoded.bitmap,
            natural_width=decoded.natural_width,
            natural_height=decoded.natural_height,
            width=width,
            height=width * decoded.aspect_ratio,
            name=name,
        )
        self.layers.append(overlay)
        self.select(overlay.id)
        return overlay

    def delete_overlay(self, overlay_id):
        """Delete an overlay; clears the selection if it pointed at it."""
        return self.layers.remove(overlay_id) is not None

    def update_overlay(self, overlay_id, **changes):
        """Direct property edit (style, text content, geometry)."""
        self.controller.flush()
        return self.layers.update(overlay_id, **changes)

    def bring_forward(self, overlay_id):
        return self.layers.bring_forward(overlay_id)

    def send_backward(self, overlay_id):
        return self.layers.send_backward(overlay_id)

    # ========================================
    # Pointer input
    # ========================================

    def handle_pointer(self, event):
        """Dispatch a PointerEvent in client coordinates.

        Down/move events without a usable canvas are ignored. Up and cancel
        always end the drag, whatever their coordinates.

        Returns:
            HitResult for a down event that hit an overlay, else None
        """
        if event.kind == POINTER_UP:
            self.controller.pointer_up()
            return None
        if event.kind == POINTER_CANCEL:
            self.controller.pointer_cancel()
            return None

        point = to_logical(event.x, event.y, self.canvas_rect, self.preview_scale)
        if point is None:
            logger.debug("Pointer %s ignored, no canvas", event.kind)
            return None

        if event.kind == POINTER_DOWN:
            return self.controller.pointer_down(point)
        if event.kind == POINTER_MOVE:
            self.controller.pointer_move(point)
        return None

    def hit_at(self, client_x, client_y):
        """Hit test a client point without starting a drag (hover feedback)."""
        point = to_logical(client_x, client_y, self.canvas_rect, self.preview_scale)
        if point is None:
            return None
        config = self.config
        return hit_test(point, self.layers, config.handle_radius, config.handle_hit_scale,
                        self.fonts, config.leader_length)

    def on_pointer_down(self, client_x, client_y):
        return self.handle_pointer(PointerEvent(client_x, client_y, POINTER_DOWN))

    def on_pointer_move(self, client_x, client_y):
        return self.handle_pointer(PointerEvent(client_x, client_y, POINTER_MOVE))

    def on_pointer_up(self, client_x=0.0, client_y=0.0):
        return self.handle_pointer(PointerEvent(client_x, client_y, POINTER_UP))

    def on_pointer_cancel(self, client_x=0.0, client_y=0.0):
        return self.handle_pointer(PointerEvent(client_x, client_y, POINTER_CANCEL))

    # ========================================
    # Rendering
    # ========================================

    def render_preview(self, preview_scale=None):
        """Render the live canvas, selection decorations included.

        Args:
            preview_scale: Pixels per logical unit (session preview_scale if None)

        Returns:
            PIL RGBA image
        """
        self.controller.flush()
        scale = preview_scale if preview_scale is not None else self.preview_scale
        return self.compositor.render(self.base_raster, self.layers, self.selection,
                                      self.logical_size, scale)

    def render_export(self, target_pixel_size, fmt='png'):
        """Render and encode the composition without decorations.

        Args:
            target_pixel_size: Output width in pixels (height keeps the
                logical aspect)
            fmt: 'png', 'jpeg', 'webp', 'bmp' or 'svg'

        Returns:
            Encoded file bytes

        Raises:
            ExportRejectedError: Vector export with overlays present, or
                without a vector source
            UnsupportedFormatError: Unknown format
            ValueError: Non-positive target size
        """
        self.controller.flush()
        name = normalize_format(fmt)
        scale = export_scale(target_pixel_size, self.logical_size)

        if is_vector_format(name):
            if len(self.layers) > 0:
                raise ExportRejectedError(
                    "SVG export is not available with text or image overlays; "
                    "choose PNG, JPEG or WEBP instead"
                )
            if self.vector_source is None:
                raise ExportRejectedError("No vector encoder available for SVG export")
            width, height = self.logical_size
            return self.vector_source((int(round(width * scale)), int(round(height * scale))))

        if not self.content_valid:
            logger.warning("Exporting without a valid base raster")

        image = self.compositor.render(self.base_raster, self.layers, None,
                                       self.logical_size, scale)
        return encode_image(image, name)
