"""
Snapshot recompression for vision requests.

Figma exports are large PNGs. Shrinking to 512px and re-encoding as WebP
keeps a snapshot small enough to send next to the node metadata.
"""

import io
import logging
from typing import Tuple

from PIL import Image

logger = logging.getLogger(__name__)

MAX_DIMENSION = 512
WEBP_QUALITY = 70
WEBP_METHOD = 6  # slowest, smallest
MIME_TYPE = 'image/webp'


def optimize_for_cli(image_bytes: bytes) -> bytes:
    """Fit inside 512x512 (never upscale), flatten onto white, encode WebP q70.

    Returns the input unchanged if the image cannot be decoded or encoded.
    """
    try:
        with Image.open(io.BytesIO(image_bytes)) as image:
            image.load()
            # thumbnail() keeps aspect ratio and never enlarges
            image.thumbnail((MAX_DIMENSION, MAX_DIMENSION), Image.Resampling.LANCZOS)

            rgba = image.convert('RGBA')
            background = Image.new('RGBA', rgba.size, (255, 255, 255, 255))
            flattened = Image.alpha_composite(background, rgba).convert('RGB')

            output = io.BytesIO()
            flattened.save(output, format='WEBP', quality=WEBP_QUALITY, method=WEBP_METHOD)
            return output.getvalue()
    except Exception as e:
        logger.warning(f"Image optimization failed, returning original bytes: {e}")
        return image_bytes


def image_size(image_bytes: bytes) -> Tuple[int, int]:
    """(width, height) of an encoded image."""
    with Image.open(io.BytesIO(image_bytes)) as image:
        return image.size
