# sampler.py
"""
Draws the source image onto the surface and samples its pixels.

The image is scaled uniformly to fit the surface and centered on both axes.
The read-back RGBA buffer is what the particle factory scans for opaque
pixels.
"""
import logging
from typing import NamedTuple

import numpy as np

from constants import BLEND_SCREEN
from visualization import Surface


class Placement(NamedTuple):
    scale: float
    x: float
    y: float
    width: float
    height: float


def fit_image(surface_width: int, surface_height: int, image_width: int, image_height: int) -> Placement:
    """
    Computes where an image lands when it is scaled to fit and centered.

    Args:
        surface_width (int): Width of the target surface.
        surface_height (int): Height of the target surface.
        image_width (int): Natural width of the image.
        image_height (int): Natural height of the image.

    Returns:
        Placement: Scale factor, top-left offset and drawn size.
    """
    if image_width <= 0 or image_height <= 0:
        raise ValueError(f"Image size must be positive, got {image_width}x{image_height}.")
    scale = min(surface_width / image_width, surface_height / image_height)
    x = surface_width / 2 - (image_width / 2) * scale
    y = surface_height / 2 - (image_height / 2) * scale
    return Placement(scale, x, y, image_width * scale, image_height * scale)


def sample_image(surface: Surface, image) -> np.ndarray:
    """
    Draws the image fitted onto the surface and reads back its pixels.

    Afterwards the surface blends additively, so particles drawn later
    brighten whatever is below them.

    Returns:
        np.ndarray: Flat RGBA buffer of the whole surface.
    """
    placement = fit_image(surface.width, surface.height, image.get_width(), image.get_height())
    logging.debug(
        f"Drawing image at ({placement.x:.1f}, {placement.y:.1f}), "
        f"scale {placement.scale:.3f}, size {placement.width:.1f}x{placement.height:.1f}."
    )
    surface.draw_image_fitted(image, placement.x, placement.y, placement.width, placement.height)
    pixels = surface.read_pixels()
    surface.set_blend_mode(BLEND_SCREEN)
    return pixels
