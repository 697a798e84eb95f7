"""Tests for the preview module.

This module tests preview/export and preview/display:
- PNG export and read-back
- Output sinks
- Error reporting for unwritable paths and malformed arrays

Note: show_preview is exercised with the non-interactive Agg backend and
plt.show patched out, so no window is opened.
"""

import numpy as np
import pytest
from PIL import Image as PILImage


def _gradient_image(height=4, width=6):
    pixels = np.zeros((height, width, 3), dtype=np.uint8)
    pixels[..., 0] = np.arange(width, dtype=np.uint8) * 40
    pixels[..., 1] = (np.arange(height, dtype=np.uint8) * 60)[:, None]
    pixels[..., 2] = 200
    return pixels


class TestSavePng:
    """Tests for save_png and load_png."""

    def test_written_file_matches_pixels(self, tmp_path):
        """Row 0 of the array is the top row of the PNG."""
        from src.pathtracer.preview.export import load_png, save_png

        pixels = _gradient_image()
        path = save_png(pixels, tmp_path / "out.png")

        assert path.exists()
        with PILImage.open(path) as image:
            assert image.size == (6, 4)
            assert image.mode == "RGB"
            assert image.getpixel((5, 0)) == (200, 0, 200)
        np.testing.assert_array_equal(load_png(path), pixels)

    def test_accepts_string_path(self, tmp_path):
        from src.pathtracer.preview.export import save_png

        path = save_png(_gradient_image(), str(tmp_path / "out.png"))

        assert path.exists()

    def test_unwritable_path_raises_export_error(self, tmp_path):
        from src.pathtracer.preview.export import ImageExportError, save_png

        with pytest.raises(ImageExportError):
            save_png(_gradient_image(), tmp_path / "missing" / "out.png")

    def test_wrong_shape_rejected(self, tmp_path):
        from src.pathtracer.preview.export import save_png

        with pytest.raises(ValueError, match="shape"):
            save_png(np.zeros((4, 6), dtype=np.uint8), tmp_path / "out.png")

    def test_wrong_dtype_rejected(self, tmp_path):
        from src.pathtracer.preview.export import save_png

        with pytest.raises(ValueError, match="dtype"):
            save_png(np.zeros((4, 6, 3), dtype=np.float32), tmp_path / "out.png")


class TestPngSink:
    def test_sink_writes_each_image(self, tmp_path):
        from src.pathtracer.preview.export import PngSink, load_png

        sink = PngSink(tmp_path / "frame.png")
        sink(_gradient_image())
        second = np.full((4, 6, 3), 7, dtype=np.uint8)
        sink(second)

        np.testing.assert_array_equal(load_png(tmp_path / "frame.png"), second)


class TestShowPreview:
    def test_returns_figure(self, monkeypatch):
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        from src.pathtracer.preview.display import show_preview

        monkeypatch.setattr(plt, "show", lambda block=True: None)

        fig = show_preview(_gradient_image(), title="test", block=False)

        assert fig.axes[0].get_title() == "test"
        plt.close(fig)
