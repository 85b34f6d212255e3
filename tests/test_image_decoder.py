"""
Tests for decoding uploaded overlay images.
"""
import io

import pytest
from PIL import Image

from codecanvas.errors import ImageDecodeError, CodeCanvasError
from codecanvas.services.image_decoder import decode_image

from conftest import make_png


class TestDecodeImage:

    def test_png(self):
        decoded = decode_image(make_png(40, 20))
        assert decoded.natural_width == 40
        assert decoded.natural_height == 20
        assert decoded.aspect_ratio == 0.5
        assert decoded.bitmap.mode == 'RGBA'

    def test_palette_image_converted_to_rgba(self):
        buffer = io.BytesIO()
        Image.new('P', (8, 8), 3).save(buffer, 'GIF')
        assert decode_image(buffer.getvalue()).bitmap.mode == 'RGBA'

    def test_jpeg(self):
        buffer = io.BytesIO()
        Image.new('RGB', (12, 30), (10, 200, 30)).save(buffer, 'JPEG')
        decoded = decode_image(buffer.getvalue())
        assert (decoded.natural_width, decoded.natural_height) == (12, 30)

    def test_garbage_bytes(self):
        with pytest.raises(ImageDecodeError):
            decode_image(b'definitely not an image')

    def test_truncated_png(self):
        with pytest.raises(ImageDecodeError):
            decode_image(make_png(64, 64)[:40])

    def test_non_bytes_input(self):
        with pytest.raises(ImageDecodeError):
            decode_image("logo.png")

    def test_error_is_codecanvas_error(self):
        with pytest.raises(CodeCanvasError):
            decode_image(b'')


class TestAddImageOverlay:

    def test_decode_failure_leaves_model_unchanged(self, session, overlay_o):
        session.select(overlay_o.id)
        with pytest.raises(ImageDecodeError):
            session.add_image_overlay(b'\x89PNG broken', name='broken.png')
        assert session.layers.ids() == [overlay_o.id]
        assert session.selection.overlay_id == overlay_o.id

    def test_default_size_follows_aspect(self, session):
        overlay = session.add_image_overlay(make_png(300, 150), name='logo.png')
        assert overlay.width == 100
        assert overlay.height == 50
        assert overlay.name == 'logo.png'
