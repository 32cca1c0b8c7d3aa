# visualization.py
"""
Handles the drawing surface of the pixelizer using Pygame.

The engine only talks to the abstract Surface. PygameSurface implements it
on an off-screen canvas with per-pixel alpha, so the alpha channel of a
drawn image can be read back for sampling, and composites that canvas onto
the display window once per frame.
"""
import logging
import math
from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple

import numpy as np
import pygame

from constants import BACKGROUND_COLOR, BLEND_FLAGS, BLEND_SOURCE_OVER, DEFAULT_COLORS

# --- Data Contracts ---
#
# class Surface (abstract):
#   - width, height: int, current canvas size.
#   - set_size(width: int, height: int) -> None
#   - clear() -> None: makes every pixel fully transparent.
#   - fill_circle(x: float, y: float, r: float, color: str) -> None
#   - draw_image_fitted(image, x: float, y: float, w: float, h: float) -> None
#   - set_blend_mode(mode: str) -> None
#   - read_pixels() -> np.ndarray:
#     - Outputs: flat uint8 array of length width * height * 4, RGBA per
#       pixel, row-major.
#
# class PygameSurface(Surface):
#   - __init__(self, window: Optional[pygame.Surface] = None, size=None, background_color=...)
#     - Side Effects: Creates an SRCALPHA canvas. Does not touch the display.
#   - present() -> None:
#     - Side Effects: Fills the window with the background, blits the canvas
#       on top and flips the display. No-op without a window.


class Surface(ABC):
    """
    The drawing capability the pixelizer needs from its host.
    """

    @property
    @abstractmethod
    def width(self) -> int:
        pass

    @property
    @abstractmethod
    def height(self) -> int:
        pass

    @abstractmethod
    def set_size(self, width: int, height: int) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass

    @abstractmethod
    def fill_circle(self, x: float, y: float, r: float, color: str) -> None:
        pass

    @abstractmethod
    def draw_image_fitted(self, image, x: float, y: float, w: float, h: float) -> None:
        pass

    @abstractmethod
    def set_blend_mode(self, mode: str) -> None:
        pass

    @abstractmethod
    def read_pixels(self) -> np.ndarray:
        pass


class PygameSurface(Surface):
    """
    A Surface backed by an off-screen pygame canvas.
    """
    def __init__(
        self,
        window: Optional[pygame.Surface] = None,
        size: Optional[Tuple[int, int]] = None,
        background_color: Tuple[int, int, int] = BACKGROUND_COLOR,
    ):
        """
        Initializes the canvas.

        Args:
            window (Optional[pygame.Surface]): The display surface the canvas
                is presented on. None renders off-screen only.
            size (Optional[Tuple[int, int]]): Initial canvas size. Defaults to
                the window size, or 1x1 when there is no window.
            background_color (Tuple[int, int, int]): Window fill behind the canvas.
        """
        self.window = window
        self.background_color = background_color
        if size is None:
            size = window.get_size() if window is not None else (1, 1)
        self.canvas = pygame.Surface(size, pygame.SRCALPHA)
        self.blend_mode = BLEND_SOURCE_OVER
        self._blend_flags = 0
        self._colors: Dict[str, pygame.Color] = {}
        self._dot_sprites: Dict[Tuple[str, float], pygame.Surface] = {}
        logging.info(f"PygameSurface initialized with a {size[0]}x{size[1]} canvas.")

    @property
    def width(self) -> int:
        return self.canvas.get_width()

    @property
    def height(self) -> int:
        return self.canvas.get_height()

    def set_size(self, width: int, height: int) -> None:
        # Like a resized canvas element, the content is discarded.
        self.canvas = pygame.Surface((int(width), int(height)), pygame.SRCALPHA)
        logging.debug(f"Canvas resized to {width}x{height}.")

    def clear(self) -> None:
        self.canvas.fill((0, 0, 0, 0))

    def set_blend_mode(self, mode: str) -> None:
        if mode not in BLEND_FLAGS:
            raise ValueError(f"Unsupported blend mode '{mode}'. Expected one of {sorted(BLEND_FLAGS)}.")
        self.blend_mode = mode
        self._blend_flags = BLEND_FLAGS[mode]
        logging.debug(f"Blend mode set to '{mode}'.")

    def _parse_color(self, color: str) -> pygame.Color:
        """Parses and caches a color, falling back to the default on invalid input."""
        parsed = self._colors.get(color)
        if parsed is None:
            try:
                parsed = pygame.Color(color)
            except (ValueError, TypeError) as e:
                logging.error(f"Could not parse color {color!r}: {e}. Falling back to {DEFAULT_COLORS[0]}.")
                parsed = pygame.Color(DEFAULT_COLORS[0])
            self._colors[color] = parsed
        return parsed

    def _dot_sprite(self, color: str, r: float) -> Tuple[pygame.Surface, int]:
        """
        Returns a pre-rendered dot for additive blitting and its half size.

        Radii are rounded to a tenth of a pixel to keep the cache small.
        """
        key = (color, round(r, 1))
        half = int(math.ceil(key[1])) + 1
        sprite = self._dot_sprites.get(key)
        if sprite is None:
            sprite = pygame.Surface((half * 2, half * 2), pygame.SRCALPHA)
            pygame.draw.circle(sprite, self._parse_color(color), (half, half), key[1])
            self._dot_sprites[key] = sprite
        return sprite, half

    def fill_circle(self, x: float, y: float, r: float, color: str) -> None:
        if self._blend_flags == 0:
            pygame.draw.circle(self.canvas, self._parse_color(color), (x, y), r)
            return
        sprite, half = self._dot_sprite(color, r)
        self.canvas.blit(
            sprite,
            (int(round(x)) - half, int(round(y)) - half),
            special_flags=self._blend_flags
        )

    def draw_image_fitted(self, image: pygame.Surface, x: float, y: float, w: float, h: float) -> None:
        size = (int(round(w)), int(round(h)))
        if size[0] <= 0 or size[1] <= 0:
            logging.warning(f"Skipping image draw, fitted size {size} is empty.")
            return
        scaled = pygame.transform.scale(image, size)
        self.canvas.blit(scaled, (int(round(x)), int(round(y))), special_flags=self._blend_flags)

    def read_pixels(self) -> np.ndarray:
        data = pygame.image.tobytes(self.canvas, "RGBA")
        return np.frombuffer(data, dtype=np.uint8)

    def present(self) -> None:
        """Composites the canvas onto the window and flips the display."""
        if self.window is None:
            return
        self.window.fill(self.background_color)
        self.window.blit(self.canvas, (0, 0))
        pygame.display.flip()


def display_viewport() -> Tuple[int, int]:
    """
    Returns the size of the open display window, or of the desktop when no
    window has been opened yet. Requires pygame.display to be initialized.
    """
    window = pygame.display.get_surface()
    if window is not None:
        return window.get_size()
    info = pygame.display.Info()
    return info.current_w, info.current_h
