"""Preview module for output and visualization.

Components:
    display: Matplotlib-based preview display
    export: PPM/PNG image export utilities

Example:
    >>> from raycaster.preview import save_ppm, show_preview
    >>> from raycaster.core.renderer import Renderer
    >>>
    >>> image = Renderer(scene).render()
    >>> save_ppm(image, "out.ppm")
    >>> show_preview(image)
"""

from raycaster.preview.display import prepare_for_display, show_preview
from raycaster.preview.export import image_to_uint8, save_image, save_png, save_ppm

__all__ = [
    # Display functions
    "show_preview",
    "prepare_for_display",
    # Export functions
    "save_ppm",
    "save_png",
    "save_image",
    "image_to_uint8",
]
