"""
Shared fixtures for CodeCanvas tests.

Provides editor sessions with a deterministic frame scheduler, a 1:1 canvas
rect (client pixels == logical units) and small in-memory images.
"""
import sys
import os
import io
import pytest

# Widget tests run without a display
os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')

# Ensure editor/src is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'editor', 'src'))

from PIL import Image

from codecanvas.config import EditorConfig
from codecanvas.models.transform import Vec2
from codecanvas.services.editor_session import EditorSession
from codecanvas.services.frame_scheduler import ManualFrameScheduler
from codecanvas.utils.coordinate_transforms import CanvasRect


# ── Image helpers ───────────────────────────────────────────────────────

def make_image(width=100, height=100, color=(255, 0, 0, 255)):
    return Image.new('RGBA', (width, height), color)


def make_png(width=100, height=100, color=(255, 0, 0, 255)):
    buffer = io.BytesIO()
    make_image(width, height, color).save(buffer, 'PNG')
    return buffer.getvalue()


# ── Fixtures ────────────────────────────────────────────────────────────

@pytest.fixture
def config():
    return EditorConfig()


@pytest.fixture
def scheduler():
    return ManualFrameScheduler()


@pytest.fixture
def session(config, scheduler):
    """Session whose client coordinates equal logical coordinates."""
    s = EditorSession(config, scheduler=scheduler)
    width, height = config.logical_size
    s.canvas_rect = CanvasRect(0, 0, width, height, width, height)
    s.preview_scale = 1.0
    return s


@pytest.fixture
def overlay_o(session):
    """Image overlay O: 100x100 at (150, 150), unrotated."""
    overlay = session.add_image_overlay(make_png(100, 100), name='o.png',
                                        width=100, position=Vec2(150, 150))
    session.clear_selection()
    return overlay


@pytest.fixture
def wide_overlay(session):
    """200x100 bitmap shown 100x50 at (150, 150) (aspect 0.5)."""
    overlay = session.add_image_overlay(make_png(200, 100, (0, 0, 255, 255)), name='wide.png',
                                        width=100, position=Vec2(150, 150))
    session.clear_selection()
    return overlay
