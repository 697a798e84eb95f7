"""Materials module for light scattering models.

Components:
    material: Base material interface
    lambertian: Ideal diffuse reflection
    metal: Specular reflection with optional fuzz
    dielectric: Glass-like refraction with Schlick reflectance
"""

from .dielectric import Dielectric
from .lambertian import Lambertian
from .material import Material
from .metal import Metal

__all__ = [
    "Material",
    "Lambertian",
    "Metal",
    "Dielectric",
]
