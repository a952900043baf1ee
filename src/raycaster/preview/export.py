"""Image export utilities for rendered images.

This module turns the linear float image produced by the renderer into
8-bit pixels and writes it to disk.

Supported formats:
    - PPM (binary pixel map, ``P6``)
    - PNG (via Pillow)

Quantization clamps every channel to [0, 1] and rounds 255 * value to the
nearest integer. No gamma or tone mapping is applied.

Example:
    >>> from raycaster.preview.export import save_ppm
    >>> from raycaster.core.renderer import Renderer
    >>>
    >>> image = Renderer(scene).render()
    >>> save_ppm(image, "out.ppm")
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

# Pillow format names by file suffix
_FORMATS = {
    ".ppm": "PPM",
    ".png": "PNG",
}


def image_to_uint8(image: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Convert a linear float image to 8 bits per channel.

    Args:
        image: Linear image array of shape (H, W, 3).

    Returns:
        Array of shape (H, W, 3) with round(255 * clamp(value, 0, 1)).

    Raises:
        ValueError: If the image is not an (H, W, 3) array.
    """
    image = np.asarray(image)
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an image of shape (H, W, 3), got {image.shape}")

    clamped = np.clip(image.astype(np.float64), 0.0, 1.0)
    return np.round(clamped * 255.0).astype(np.uint8)


def save_ppm(image: npt.NDArray[np.floating], filepath: str | Path) -> None:
    """Save an image as a binary pixel map.

    The file holds the header ``P6``, width, height and maximum value 255,
    followed by 3 bytes (R, G, B) per pixel, rows top to bottom and pixels
    left to right.

    Args:
        image: Linear image array of shape (H, W, 3).
        filepath: Output file path.
    """
    _save(image, filepath, "PPM")


def save_png(image: npt.NDArray[np.floating], filepath: str | Path) -> None:
    """Save an image as an 8-bit PNG file (no gamma correction)."""
    _save(image, filepath, "PNG")


def save_image(image: npt.NDArray[np.floating], filepath: str | Path) -> None:
    """Save an image, choosing the format from the file suffix.

    Raises:
        ValueError: If the suffix is not .ppm or .png.
    """
    suffix = Path(filepath).suffix.lower()
    if suffix not in _FORMATS:
        raise ValueError(f"Unsupported output format {suffix!r}; use .ppm or .png")
    _save(image, filepath, _FORMATS[suffix])


def _save(image: npt.NDArray[np.floating], filepath: str | Path, fmt: str) -> None:
    image_uint8 = image_to_uint8(image)
    pil_image = PILImage.fromarray(image_uint8)
    pil_image.save(filepath, format=fmt)
