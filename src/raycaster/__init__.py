"""Taichi-based Whitted ray caster for scenes of spheres and point lights.

This package renders a still image by casting one ray per pixel from a
fixed camera, with support for:
- Closed-form ray-sphere intersection and nearest-hit scene queries
- Phong shading (diffuse + specular) with hard shadows from point lights
- Mirror reflection up to a fixed maximum depth
- Binary pixel-map (PPM) and PNG output

Subpackages:
    core: Vector utilities, shading engine, raster driver and renderer
    geometry: Sphere primitive and intersection
    materials: Phong material model and registry
    scene: Scene storage, construction, file input and the demo scene
    camera: Pinhole camera and primary ray generation
    preview: Image export and Matplotlib preview
"""

__version__ = "0.1.0"
