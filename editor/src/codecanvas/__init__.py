"""
CodeCanvas - overlay editor for QR and barcode images

Composes a base code image with freely positioned, rotated and resized text
and image overlays, previewed live and exported at any resolution.
"""

__version__ = "1.0.0"
