"""Shared fixtures for the pixelizer tests."""

import os

# Headless pygame: must be set before pygame initializes its display.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

from typing import Iterable, Optional, Tuple

import numpy as np
import pygame
import pytest

from loader import DecodeError, ImageLoader
from scheduler import ManualFrameScheduler
from visualization import PygameSurface


@pytest.fixture(scope="session", autouse=True)
def pygame_display():
    """Initializes a dummy display for the whole test session."""
    pygame.display.init()
    pygame.display.set_mode((1, 1))
    yield
    pygame.display.quit()


class FakeImageLoader(ImageLoader):
    """Delivers a prepared image, or an error, on the next scheduled frame."""

    def __init__(self, scheduler, image: Optional[pygame.Surface] = None):
        self.scheduler = scheduler
        self.image = image
        self.requests = []

    def load(self, source, on_load, on_error) -> None:
        self.requests.append(source)
        image = self.image

        def deliver():
            if image is None:
                on_error(DecodeError(source, "no such image"))
            else:
                on_load(image)

        self.scheduler.schedule(deliver)


class CountingSurface(PygameSurface):
    """PygameSurface that counts clears and drawn circles."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.clear_count = 0
        self.circle_count = 0

    def clear(self) -> None:
        self.clear_count += 1
        super().clear()

    def fill_circle(self, x, y, r, color) -> None:
        self.circle_count += 1
        super().fill_circle(x, y, r, color)


def make_image(size: Tuple[int, int], opaque: Iterable[Tuple[int, int]] = ()) -> pygame.Surface:
    """Returns a transparent image with the given pixels fully opaque."""
    image = pygame.Surface(size, pygame.SRCALPHA)
    image.fill((0, 0, 0, 0))
    for point in opaque:
        image.set_at(point, (255, 255, 255, 255))
    return image


def make_pixels(width: int, height: int, opaque: Iterable[Tuple[int, int]] = (), alpha: int = 255) -> np.ndarray:
    """Returns a flat RGBA buffer with alpha set at the given (x, y) points."""
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    for x, y in opaque:
        pixels[y, x] = (255, 255, 255, alpha)
    return pixels.ravel()


@pytest.fixture
def scheduler() -> ManualFrameScheduler:
    return ManualFrameScheduler()


@pytest.fixture
def surface() -> CountingSurface:
    return CountingSurface()


def viewport_800x600() -> Tuple[int, int]:
    return 800, 600
