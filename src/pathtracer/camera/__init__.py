"""Camera module for view and ray generation.

Ray generation uses normalized screen coordinates:
    s in [0, 1]: left to right across image
    t in [0, 1]: bottom to top across image
"""

from .thin_lens import Camera, CameraSettings

__all__ = [
    "Camera",
    "CameraSettings",
]
