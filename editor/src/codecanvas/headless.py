"""Headless overlay renderer - CLI entry point.

Composes a pre-encoded code image (QR or barcode PNG) with text and image
overlays and writes the export, without opening a window.

Usage:
    codecanvas-render <base_image> -o OUTPUT [--size N] [--format FMT]
                      [--text "TEXT@X,Y"]... [--image "PATH@X,Y[:WIDTH]"]...

Examples:
    codecanvas-render qr.png -o out.png
    codecanvas-render qr.png -o out.jpg --size 2048 --text "Scan me@150,280"
    codecanvas-render qr.png -o out.png --image logo.png@150,150:60

Overlay positions are in logical canvas units (default canvas 300x300).
"""

import sys
import os
import argparse
import logging

from .config import EditorConfig, load_config
from .errors import CodeCanvasError
from .models.transform import Vec2
from .services.editor_session import EditorSession
from .services.image_decoder import decode_image

logger = logging.getLogger(__name__)


def _split_anchor(spec: str):
    """Split 'CONTENT@X,Y[:EXTRA]' into (content, Vec2, extra or None).

    The last '@' separates content from the position so text may contain '@'.
    """
    content, sep, where = spec.rpartition('@')
    if not sep:
        raise ValueError(f"Missing '@X,Y' position in {spec!r}")
    extra = None
    if ':' in where:
        where, extra = where.split(':', 1)
    try:
        x_str, y_str = where.split(',')
        point = Vec2(float(x_str), float(y_str))
    except ValueError:
        raise ValueError(f"Bad position {where!r} in {spec!r}, expected X,Y") from None
    return content, point, extra


def parse_text_spec(spec: str):
    """'TEXT@X,Y' -> (text, Vec2)"""
    text, point, extra = _split_anchor(spec)
    if extra is not None:
        raise ValueError(f"Unexpected ':{extra}' in text overlay {spec!r}")
    return text, point


def parse_image_spec(spec: str):
    """'PATH@X,Y[:WIDTH]' -> (path, Vec2, width or None)"""
    path, point, extra = _split_anchor(spec)
    width = None
    if extra is not None:
        try:
            width = float(extra)
        except ValueError:
            raise ValueError(f"Bad width {extra!r} in {spec!r}") from None
    return path, point, width


def build_session(args, config):
    """Create a session with the base image and all requested overlays.

    Raises:
        OSError, CodeCanvasError, ValueError: on unreadable inputs
    """
    session = EditorSession(config)

    with open(args.base_image, 'rb') as f:
        session.set_base_raster(decode_image(f.read()).bitmap)

    for spec in args.text:
        text, point = parse_text_spec(spec)
        session.add_text_overlay(text, position=point)

    for spec in args.image:
        path, point, width = parse_image_spec(spec)
        with open(path, 'rb') as f:
            data = f.read()
        kwargs = {'position': point, 'name': os.path.basename(path)}
        if width is not None:
            kwargs['width'] = width
        session.add_image_overlay(data, **kwargs)

    session.clear_selection()
    return session


def build_parser():
    parser = argparse.ArgumentParser(
        prog='codecanvas-render',
        description='Compose a code image with text/image overlays and export it (headless).',
    )
    parser.add_argument(
        'base_image',
        help='Path to the pre-encoded QR/barcode image.',
    )
    parser.add_argument(
        '-o', '--output',
        required=True,
        help='Output file path.',
    )
    parser.add_argument(
        '--size',
        type=int,
        default=None,
        help='Export width in pixels (default: from config, 1024).',
    )
    parser.add_argument(
        '--format',
        default=None,
        help='Export format: png, jpeg, webp, bmp, svg (default: output extension).',
    )
    parser.add_argument(
        '--logical-size',
        type=float,
        default=None,
        help='Logical canvas size in units (square, default: 300).',
    )
    parser.add_argument(
        '--text',
        action='append',
        default=[],
        metavar='TEXT@X,Y',
        help='Add a text overlay centred on X,Y. May be repeated.',
    )
    parser.add_argument(
        '--image',
        action='append',
        default=[],
        metavar='PATH@X,Y[:WIDTH]',
        help='Add an image overlay centred on X,Y. May be repeated.',
    )
    parser.add_argument(
        '--config',
        default=None,
        help='Config file path (default: ~/.codecanvas/config.json).',
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose logging.',
    )
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    # Logging
    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    config = load_config(args.config)
    if args.logical_size is not None:
        config = EditorConfig.from_dict(dict(config.to_dict(),
                                             logical_width=args.logical_size,
                                             logical_height=args.logical_size))

    size = args.size if args.size is not None else config.export_size
    fmt = args.format or os.path.splitext(args.output)[1] or config.export_format

    if not os.path.isfile(args.base_image):
        print(f"Error: Base image not found: {args.base_image}")
        return 1

    try:
        session = build_session(args, config)
        data = session.render_export(size, fmt)
    except (OSError, ValueError, CodeCanvasError) as e:
        print(f"Error: {e}")
        if args.verbose:
            logger.exception("Render failed")
        return 1

    output_dir = os.path.dirname(os.path.abspath(args.output))
    os.makedirs(output_dir, exist_ok=True)
    with open(args.output, 'wb') as f:
        f.write(data)

    print(f"Wrote {args.output} ({len(session.layers)} overlay(s), {size}px)")
    return 0


if __name__ == '__main__':
    sys.exit(main())
