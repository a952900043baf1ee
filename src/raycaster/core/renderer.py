"""Renderer tying a scene, the render settings and the image buffer together.

The Renderer uploads the scene and its camera, sizes the render target,
applies the render settings and runs the pixel kernel. Rendering has no state beyond the
scene and the settings, so rendering the same scene twice gives identical
images.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycaster.core.renderer import Renderer
    >>> from raycaster.scene.demo import create_demo_scene
    >>>
    >>> renderer = Renderer(create_demo_scene(width=320, height=240))
    >>> image = renderer.render()
    >>> renderer.save("out.ppm")
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from raycaster.camera.pinhole import setup_camera
from raycaster.core.integrator import (
    RenderSettings,
    configure_render,
    get_image_numpy,
    render_image,
    render_pixel,
    setup_render_target,
)
from raycaster.preview.export import save_image

if TYPE_CHECKING:
    from raycaster.core.ray import Vector3
    from raycaster.scene.manager import SceneManager

logger = logging.getLogger(__name__)


class Renderer:
    """Renders a SceneManager's scene through its camera.

    Attributes:
        scene: The scene to render.
        settings: Depth bound, far plane and background color.
    """

    def __init__(self, scene: SceneManager, settings: RenderSettings | None = None) -> None:
        """Initialize the renderer.

        Args:
            scene: The scene to render. Its camera sets the image size.
            settings: Render settings (defaults to RenderSettings()).

        Raises:
            ValueError: If the camera size exceeds the render target maximum.
        """
        self.scene = scene
        self.settings = settings if settings is not None else RenderSettings()
        self._image: npt.NDArray[np.float32] | None = None
        self._prepare()

    @property
    def width(self) -> int:
        return self.scene.camera.width

    @property
    def height(self) -> int:
        return self.scene.camera.height

    def _prepare(self) -> None:
        self.scene.upload()
        setup_camera(self.scene.camera)
        setup_render_target(self.width, self.height)
        configure_render(self.settings)

    def render(self) -> npt.NDArray[np.float32]:
        """Render the full image.

        Returns:
            Linear, unclamped image of shape (height, width, 3).
        """
        self._prepare()

        logger.info(
            "Rendering %dx%d: %d spheres, %d lights, max depth %d",
            self.width,
            self.height,
            self.scene.get_sphere_count(),
            self.scene.get_light_count(),
            self.settings.max_depth,
        )
        start = time.perf_counter()
        render_image()
        self._image = get_image_numpy()
        logger.info("Render finished in %.2fs", time.perf_counter() - start)

        return self._image

    def render_pixel(self, pixel_i: int, pixel_j: int) -> Vector3:
        """Render one pixel (column i from the left, row j from the top)."""
        self._prepare()
        return render_pixel(pixel_i, pixel_j)

    def save(self, filepath: str | Path) -> Path:
        """Save the last rendered image, rendering first if needed.

        The format follows the suffix (.ppm or .png).

        Returns:
            The path written.
        """
        if self._image is None:
            self.render()
        path = Path(filepath)
        save_image(self._image, path)
        logger.info("Saved %s", path)
        return path

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"max_depth={self.settings.max_depth})"
        )
