"""
CodeCanvas - Constants and Configuration

This module contains all constant values used throughout the application:
- Logical canvas defaults
- Overlay defaults and minimum sizes
- Selection decoration (handle) geometry
- Export formats
"""

# ======================================================================
# LOGICAL CANVAS
# ======================================================================

# Logical space is the document coordinate system. Preview zoom and export
# resolution are both expressed as a scale factor on top of it.
DEFAULT_LOGICAL_WIDTH = 300
DEFAULT_LOGICAL_HEIGHT = 300

# On-screen preview renders at this many pixels per logical unit
DEFAULT_PREVIEW_SCALE = 2.0

# ======================================================================
# OVERLAY DEFAULTS
# ======================================================================

DEFAULT_TEXT = "New Text"
DEFAULT_TEXT_COLOR = "#000000"
DEFAULT_FONT_SIZE = 20.0
DEFAULT_FONT_FAMILY = "DejaVuSans"
DEFAULT_FONT_WEIGHT = "normal"
DEFAULT_FONT_STYLE = "normal"
DEFAULT_TEXT_ALIGN = "center"

# Image overlays are created this wide; height follows the bitmap aspect
DEFAULT_IMAGE_WIDTH = 100.0

DEFAULT_ROTATION = 0.0

FONT_WEIGHTS = ('normal', 'bold')
FONT_STYLES = ('normal', 'italic')
TEXT_ALIGNMENTS = ('left', 'center', 'right')

# ======================================================================
# SIZE CONSTRAINTS
# ======================================================================

# Width, height and font size never reach zero (aspect ratio divides by them)
MIN_OVERLAY_SIZE = 1.0
MIN_FONT_SIZE = 1.0

# ======================================================================
# TRANSFORM HANDLES
# ======================================================================

# One canonical geometry for every code type (QR and barcode alike)
HANDLE_RADIUS = 8.0            # Resize/rotate handle radius (logical units)
ROTATE_LEADER_LENGTH = 20.0    # Gap between top edge and rotate handle
HANDLE_HIT_SCALE = 1.0         # Multiplier applied to radius/leader when hit testing
SELECTION_STROKE_WIDTH = 2.0   # Outline width (logical units)

SELECTION_STROKE_COLOR = (0, 153, 255, 255)   # #09f
HANDLE_FILL_COLOR = (255, 255, 255, 255)

# ======================================================================
# DRAG MODES
# ======================================================================

MODE_MOVE = 'move'
MODE_RESIZE = 'resize'
MODE_ROTATE = 'rotate'

# ======================================================================
# FRAME COALESCING
# ======================================================================

# Pointer moves are applied at most once per frame tick
FRAME_INTERVAL_MS = 16

# ======================================================================
# EXPORT
# ======================================================================

DEFAULT_EXPORT_SIZE = 1024
DEFAULT_EXPORT_FORMAT = 'png'

# format name -> Pillow format id
RASTER_EXPORT_FORMATS = {
    'png': 'PNG',
    'jpeg': 'JPEG',
    'jpg': 'JPEG',
    'webp': 'WEBP',
    'bmp': 'BMP',
}
VECTOR_EXPORT_FORMATS = ('svg',)

JPEG_QUALITY = 95

# Transparent by default; JPEG exports flatten onto EXPORT_MATTE_COLOR
DEFAULT_BACKGROUND_COLOR = (0, 0, 0, 0)
EXPORT_MATTE_COLOR = (255, 255, 255)

# ======================================================================
# CONFIG FILE
# ======================================================================

CONFIG_DIR_NAME = '.codecanvas'
CONFIG_FILE_NAME = 'config.json'
