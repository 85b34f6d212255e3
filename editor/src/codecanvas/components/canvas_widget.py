"""
CodeCanvas - Canvas Widget

Qt view of an EditorSession. The widget owns no editing state: it paints
session.render_preview() fitted and centred in its rect and forwards mouse
events in widget coordinates, together with a CanvasRect describing where
the preview sits.
"""

import logging

import numpy as np
from PyQt5.QtWidgets import QWidget, QSizePolicy
from PyQt5.QtCore import Qt, QTimer, QSize
from PyQt5.QtGui import QPainter, QImage, QColor

from ..services.frame_scheduler import FrameScheduler
from ..utils.coordinate_transforms import CanvasRect
from .transform_widgets import SELECTION_MODE
from ..constants import FRAME_INTERVAL_MS

logger = logging.getLogger(__name__)


class QtFrameScheduler(FrameScheduler):
	"""Frame ticks driven by single-shot QTimers on the GUI thread."""
	
	def __init__(self, interval_ms=FRAME_INTERVAL_MS):
		self.interval_ms = interval_ms
		self._timers = {}
		self._next_handle = 1
	
	def request_frame(self, callback):
		handle = self._next_handle
		self._next_handle += 1
		
		timer = QTimer()
		timer.setSingleShot(True)
		timer.timeout.connect(lambda: self._fire(handle, callback))
		self._timers[handle] = timer
		timer.start(self.interval_ms)
		return handle
	
	def cancel_frame(self, handle):
		timer = self._timers.pop(handle, None)
		if timer is not None:
			timer.stop()
	
	def _fire(self, handle, callback):
		if self._timers.pop(handle, None) is None:
			return
		callback()


def pil_to_qimage(image):
	"""Convert a PIL RGBA image to a QImage that owns its pixels"""
	arr = np.ascontiguousarray(np.asarray(image.convert('RGBA'), dtype=np.uint8))
	height, width = arr.shape[:2]
	qimage = QImage(arr.data, width, height, width * 4, QImage.Format_RGBA8888)
	# Detach from the numpy buffer before it goes out of scope
	return qimage.copy()


class CanvasWidget(QWidget):
	"""Interactive preview of the overlay composition"""
	
	def __init__(self, session, parent=None):
		super().__init__(parent)
		self.session = session
		
		self.setMouseTracking(True)
		self.setFocusPolicy(Qt.StrongFocus)
		self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
		
		self.background_color = QColor(53, 53, 53)
		self._painting = False
		self.session.layers.subscribe(self._on_layers_changed)
		self.session.subscribe_selection(self._on_selection_changed)
	
	def sizeHint(self):
		width, height = self.session.logical_size
		scale = self.session.config.preview_scale
		return QSize(int(width * scale), int(height * scale))
	
	# ========================================
	# Geometry
	# ========================================
	
	def fit_scale(self):
		"""Preview pixels per logical unit that fit the logical canvas in the widget"""
		width, height = self.session.logical_size
		if self.width() <= 0 or self.height() <= 0:
			return 0.0
		return min(self.width() / width, self.height() / height)
	
	def preview_rect(self, scale):
		"""CanvasRect of the preview centred in the widget at the given scale"""
		width, height = self.session.logical_size
		pixel_width = int(round(width * scale))
		pixel_height = int(round(height * scale))
		left = (self.width() - pixel_width) // 2
		top = (self.height() - pixel_height) // 2
		return CanvasRect(left, top, pixel_width, pixel_height, pixel_width, pixel_height)
	
	def _sync_canvas_rect(self):
		scale = self.fit_scale()
		if scale <= 0:
			self.session.canvas_rect = None
			return None
		rect = self.preview_rect(scale)
		self.session.preview_scale = scale
		self.session.canvas_rect = rect
		return rect
	
	def resizeEvent(self, event):
		super().resizeEvent(event)
		self._sync_canvas_rect()
	
	# ========================================
	# Painting
	# ========================================
	
	def paintEvent(self, event):
		painter = QPainter(self)
		try:
			painter.fillRect(self.rect(), self.background_color)
			rect = self._sync_canvas_rect()
			if rect is None:
				return
			# render_preview flushes a pending move; that change is painted now
			self._painting = True
			try:
				image = self.session.render_preview(self.session.preview_scale)
			finally:
				self._painting = False
			painter.drawImage(int(rect.left), int(rect.top), pil_to_qimage(image))
		finally:
			painter.end()
	
	def _on_layers_changed(self, event, overlay_id):
		if self._painting:
			return
		self.update()
	
	def _on_selection_changed(self, selection):
		self.update()
	
	# ========================================
	# Mouse Events
	# ========================================
	
	def mousePressEvent(self, event):
		if event.button() != Qt.LeftButton:
			super().mousePressEvent(event)
			return
		self._sync_canvas_rect()
		self.session.on_pointer_down(event.x(), event.y())
		self.update()
	
	def mouseMoveEvent(self, event):
		if self.session.controller.is_dragging:
			self.session.on_pointer_move(event.x(), event.y())
		else:
			self._update_hover_cursor(event.x(), event.y())
	
	def mouseReleaseEvent(self, event):
		if event.button() != Qt.LeftButton:
			super().mouseReleaseEvent(event)
			return
		self.session.on_pointer_up(event.x(), event.y())
		self._update_hover_cursor(event.x(), event.y())
		self.update()
	
	def focusOutEvent(self, event):
		"""Losing focus mid-drag (window switch, dialog) cancels the drag"""
		if self.session.controller.is_dragging:
			logger.debug("Focus lost during drag, cancelling")
			self.session.on_pointer_cancel()
			self.update()
		super().focusOutEvent(event)
	
	def _update_hover_cursor(self, x, y):
		hit = self.session.hit_at(x, y)
		if hit is None:
			self.unsetCursor()
			return
		handle = SELECTION_MODE.get_handle(hit.mode)
		self.setCursor(getattr(Qt, handle.cursor, Qt.ArrowCursor))
