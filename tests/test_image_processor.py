"""
Tests for snapshot recompression
"""
import io

from PIL import Image

from design_system.image_processor import image_size, optimize_for_cli


def _png(width, height, color=(255, 0, 0, 128)):
    output = io.BytesIO()
    Image.new('RGBA', (width, height), color).save(output, format='PNG')
    return output.getvalue()


class TestOptimizeForCli:
    """Shrink to 512px and re-encode as WebP"""

    def test_large_image_fits_limit(self):
        result = optimize_for_cli(_png(2048, 1024))
        assert result[:4] == b'RIFF' and result[8:12] == b'WEBP'
        assert image_size(result) == (512, 256)

    def test_small_image_not_upscaled(self):
        assert image_size(optimize_for_cli(_png(100, 40))) == (100, 40)

    def test_transparency_flattened_on_white(self):
        result = optimize_for_cli(_png(10, 10, (0, 0, 0, 0)))
        with Image.open(io.BytesIO(result)) as image:
            assert image.mode == 'RGB'
            r, g, b = image.convert('RGB').getpixel((5, 5))
        assert min(r, g, b) > 240, "transparent pixels should become white"

    def test_invalid_bytes_returned_unchanged(self):
        data = b'not an image'
        assert optimize_for_cli(data) is data
