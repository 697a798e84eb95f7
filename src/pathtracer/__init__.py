"""Monte Carlo path tracer for scenes of analytic surfaces.

Every pixel averages many jittered camera rays. Each ray bounces through
the scene according to the material of the surface it hits until it
escapes to the sky, is absorbed, or runs out of bounces.

Subpackages:
    core: Vector algebra, rays, the shading integrator, and the sampler
    geometry: Intersection contract, spheres, cuboids and surface lists
    materials: Lambertian, metal and dielectric scattering
    camera: Thin-lens camera with optional depth of field
    scene: Scene construction from descriptions, and preset scenes
    preview: PNG export and Matplotlib preview
"""

__version__ = "0.1.0"
