"""Preview module for output and visualization.

Components:
    export: PNG output sink (Pillow)
    display: Matplotlib preview window
"""

from .display import show_preview
from .export import ImageExportError, ImageSink, PngSink, load_png, save_png

__all__ = [
    "show_preview",
    "save_png",
    "load_png",
    "PngSink",
    "ImageSink",
    "ImageExportError",
]
