"""Matplotlib-based preview display for rendered images.

Example:
    >>> from raycaster.preview.display import show_preview
    >>> from raycaster.core.renderer import Renderer
    >>>
    >>> image = Renderer(scene).render()
    >>> show_preview(image)
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt


def prepare_for_display(image: npt.NDArray[np.floating]) -> npt.NDArray[np.float32]:
    """Clamp a linear image to [0, 1] for display."""
    return np.clip(image, 0.0, 1.0).astype(np.float32)


def show_preview(
    image: npt.NDArray[np.floating],
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 6),
    block: bool = True,
) -> None:
    """Display a rendered image in a Matplotlib figure.

    Args:
        image: Linear image array of shape (H, W, 3).
        title: Figure title (default shows the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    display_image = prepare_for_display(image)

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image)
    ax.axis("off")

    if title is None:
        height, width = display_image.shape[:2]
        title = f"Render Preview - {width}x{height}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
