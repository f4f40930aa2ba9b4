#!/usr/bin/env python3
"""
CLI interface for page scanning.

Usage:
    python -m page_rectification -i photo.jpg
    python -m page_rectification -i photo.jpg -o page.png --enhance sharpen
"""

import argparse
import logging
import sys
from pathlib import Path

import cv2

from common import config
from common.errors import ScannerError
from page_detection import DetectionOptions, PageDetector, PageVisualizer
from .enhancer import EnhanceMode
from .rectifier import RectifyOptions, rectify


def parse_args(argv=None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        description='Detect a document page in a photo and rectify it',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:

  # Rectify a photo (writes photo_page.png next to it)
  python -m page_rectification -i photo.jpg

  # Rectify, sharpen and save a preview of the detected corners
  python -m page_rectification -i photo.jpg -o page.png --enhance sharpen --overlay preview.jpg

Environment variables (also read from .env):
  SCANNER_MIN_AREA_RATIO, SCANNER_MAX_AREA_RATIO, SCANNER_CANNY_LOW,
  SCANNER_CANNY_HIGH, SCANNER_MIN_SCORE, SCANNER_DEFAULT_MARGIN,
  SCANNER_MAX_OUTPUT_DIMENSION, SCANNER_LOG_LEVEL
        """
    )

    parser.add_argument(
        '-i', '--input',
        required=True,
        help='Input image'
    )

    parser.add_argument(
        '-o', '--output',
        help='Output file (default: <input>_page.png)'
    )

    parser.add_argument(
        '--enhance',
        choices=[mode.value for mode in EnhanceMode],
        help='Enhance the rectified page'
    )

    parser.add_argument(
        '--max-dimension',
        type=int,
        help='Cap for the longer output side in pixels, 0 for no cap'
    )

    parser.add_argument(
        '--min-area',
        type=float,
        help='Minimum page area as a fraction of the image'
    )

    parser.add_argument(
        '--lenient',
        action='store_true',
        help='Also accept 5-6 vertex outlines'
    )

    parser.add_argument(
        '--overlay',
        help='Also save the input with the detected corners drawn on it'
    )

    return parser.parse_args(argv)


def default_output_path(input_path: Path) -> Path:
    return input_path.with_name(f"{input_path.stem}_page.png")


def main(argv=None):
    """Main CLI function"""
    args = parse_args(argv)
    logging.basicConfig(level=config.log_level(), format='%(levelname)s %(name)s: %(message)s')

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"❌ Error: Input file not found: {input_path}")
        sys.exit(1)

    image = cv2.imread(str(input_path))
    if image is None:
        print(f"❌ Error: Failed to load image: {input_path}")
        sys.exit(1)

    rectify_kwargs = {}
    if args.max_dimension is not None:
        rectify_kwargs['max_output_dimension'] = args.max_dimension or None
    if args.enhance:
        rectify_kwargs['enhance'] = True
        rectify_kwargs['enhance_mode'] = EnhanceMode(args.enhance)

    print(f"📄 Processing: {input_path.name} ({image.shape[1]}x{image.shape[0]} px)")

    try:
        detection_options = DetectionOptions(min_area_ratio=args.min_area, lenient=args.lenient)
        rectify_options = RectifyOptions(**rectify_kwargs)

        detector = PageDetector(detection_options)
        corners, source = detector.detect_with_source(image)
        print(f"  🔍 Corners ({source}): " + ", ".join(f"({x:.0f}, {y:.0f})" for x, y in corners))

        page = rectify(image, corners, rectify_options)
    except (ScannerError, ValueError) as e:
        print(f"❌ Error while processing: {e}")
        sys.exit(1)

    output_path = Path(args.output) if args.output else default_output_path(input_path)
    if not cv2.imwrite(str(output_path), page):
        print(f"❌ Error: Failed to write {output_path}")
        sys.exit(1)
    print(f"✅ Done: {output_path} ({page.shape[1]}x{page.shape[0]} px)")

    if args.overlay:
        preview = PageVisualizer().visualize(image, corners)
        if not cv2.imwrite(args.overlay, preview):
            print(f"❌ Error: Failed to write {args.overlay}")
            sys.exit(1)
        print(f"  🖼️  Overlay: {args.overlay}")

    return 0


if __name__ == '__main__':
    main()
