"""Exception types raised by the CodeCanvas engine."""


class CodeCanvasError(Exception):
    """Base class for all CodeCanvas errors."""


class ImageDecodeError(CodeCanvasError):
    """Uploaded bytes could not be decoded into a bitmap.

    The overlay is not added and the layer model is left unchanged.
    """


class ExportRejectedError(CodeCanvasError):
    """Export was refused for the current layer list (e.g. SVG with overlays)."""


class UnsupportedFormatError(CodeCanvasError):
    """Requested export format is not known."""
