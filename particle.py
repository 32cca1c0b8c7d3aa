# particle.py
"""
Creates and stores the particles of the pixelizer.

This module defines the ParticleSystem class, which scans a sampled pixel
buffer on a grid and keeps one particle per sufficiently opaque grid cell.
Particle state (position, destination, velocity, ...) lives in NumPy
arrays, one row per particle, in creation order.
"""
import logging
import math
from typing import NamedTuple, Tuple

import numpy as np

from constants import BASE_PARTICLE_RADIUS, BASE_FRICTION, FRICTION_VALUE_SCALE
from options import PixelizerOptions

# --- Data Contracts ---
#
# grid_steps(width: int, height: int, amount: int) -> Tuple[int, int]
#
# select_destinations(pixels, width, height, amount, threshold) -> np.ndarray:
#   - Inputs:
#     - pixels: flat RGBA uint8 buffer, length width * height * 4.
#   - Outputs: float64 array of shape (N, 2) with the (x, y) grid cells whose
#     alpha exceeds threshold, ordered by x first, then y.
#   - Invariants: No randomness. The same buffer always gives the same cells.
#
# class ParticleSystem:
#   - from_pixels(pixels, width, height, options, rng) -> ParticleSystem
#   - Invariants:
#     - positions, destinations, velocities, accelerations: float64 (N, 2).
#     - radii, frictions: float64 (N,). color_indices: int64 (N,).
#     - destinations, radii, frictions and color_indices never change after
#       creation.


class Particle(NamedTuple):
    """Read-only snapshot of a single particle."""
    x: float
    y: float
    dest: Tuple[float, float]
    radius: float
    vx: float
    vy: float
    acc_x: float
    acc_y: float
    friction: float
    color: str


def grid_steps(width: int, height: int, amount: int) -> Tuple[int, int]:
    """Returns the horizontal and vertical sampling step for a grid density."""
    return math.ceil(width / amount), math.ceil(height / amount)


def select_destinations(pixels: np.ndarray, width: int, height: int, amount: int, threshold: int) -> np.ndarray:
    """
    Finds the grid cells of the pixel buffer that become particles.

    Args:
        pixels (np.ndarray): Flat RGBA buffer of the whole surface.
        width (int): Surface width.
        height (int): Surface height.
        amount (int): Grid density, the number of cells along each axis.
        threshold (int): Alpha values above this select a cell.

    Returns:
        np.ndarray: (N, 2) destinations, x-major like a nested x/y scan.
    """
    pixels = np.asarray(pixels, dtype=np.uint8)
    if pixels.size != width * height * 4:
        raise ValueError(
            f"Pixel buffer holds {pixels.size} values, expected {width * height * 4} "
            f"for a {width}x{height} surface."
        )
    step_x, step_y = grid_steps(width, height, amount)
    xs = np.arange(0, width, step_x)
    ys = np.arange(0, height, step_y)

    alpha = pixels.reshape(height, width, 4)[:, :, 3]
    # Transposed so that nonzero() walks x in the outer loop and y in the inner one.
    mask = alpha[np.ix_(ys, xs)].T > threshold
    xi, yi = np.nonzero(mask)
    logging.debug(
        f"Sampled a {len(xs)}x{len(ys)} grid (step {step_x}x{step_y}), "
        f"{len(xi)} cells above threshold {threshold}."
    )
    return np.column_stack((xs[xi], ys[yi])).astype(np.float64)


class ParticleSystem:
    """
    A container for all particles, managing their state via NumPy arrays.
    """
    def __init__(
        self,
        positions: np.ndarray,
        destinations: np.ndarray,
        velocities: np.ndarray,
        radii: np.ndarray,
        frictions: np.ndarray,
        color_indices: np.ndarray,
        colors: Tuple[str, ...],
    ):
        self.positions = np.ascontiguousarray(positions, dtype=np.float64).reshape(-1, 2)
        self.destinations = np.ascontiguousarray(destinations, dtype=np.float64).reshape(-1, 2)
        self.velocities = np.ascontiguousarray(velocities, dtype=np.float64).reshape(-1, 2)
        self.accelerations = np.zeros_like(self.positions)
        self.radii = np.ascontiguousarray(radii, dtype=np.float64)
        self.frictions = np.ascontiguousarray(frictions, dtype=np.float64)
        self.color_indices = np.asarray(color_indices, dtype=np.int64)
        self.colors = tuple(colors)
        self.particle_count = self.positions.shape[0]

    @classmethod
    def empty(cls, colors: Tuple[str, ...]) -> "ParticleSystem":
        return cls(
            np.zeros((0, 2)), np.zeros((0, 2)), np.zeros((0, 2)),
            np.zeros(0), np.zeros(0), np.zeros(0, dtype=np.int64), colors
        )

    @classmethod
    def from_pixels(
        cls,
        pixels: np.ndarray,
        width: int,
        height: int,
        options: PixelizerOptions,
        rng: np.random.Generator,
    ) -> "ParticleSystem":
        """
        Creates one particle per opaque grid cell with randomized kinematics.

        Args:
            pixels (np.ndarray): Flat RGBA buffer of the sampled surface.
            width (int): Surface width.
            height (int): Surface height.
            options (PixelizerOptions): Grid density, threshold and the
                ranges of the random particle parameters.
            rng (np.random.Generator): Source of all randomness.
        """
        destinations = select_destinations(pixels, width, height, options.amount, options.threshold)
        count = destinations.shape[0]

        positions = rng.uniform(low=[0, 0], high=[width, height], size=(count, 2))
        spread = np.array([options.horizontal_distribution, options.vertical_distribution], dtype=np.float64)
        velocities = (rng.random((count, 2)) - 0.5) * spread
        radii = rng.random(count) * options.pixel_radius + BASE_PARTICLE_RADIUS
        frictions = rng.random(count) * options.friction_value / FRICTION_VALUE_SCALE + BASE_FRICTION
        color_indices = rng.integers(low=0, high=len(options.colors), size=count)

        system = cls(positions, destinations, velocities, radii, frictions, color_indices, options.colors)
        logging.info(f"ParticleSystem created {count} particles from a {width}x{height} pixel buffer.")
        return system

    def __len__(self) -> int:
        return self.particle_count

    def color_of(self, index: int) -> str:
        return self.colors[self.color_indices[index]]

    def particle(self, index: int) -> Particle:
        """Returns a snapshot of the particle at index."""
        pos = self.positions[index]
        vel = self.velocities[index]
        acc = self.accelerations[index]
        dest = self.destinations[index]
        return Particle(
            x=float(pos[0]), y=float(pos[1]),
            dest=(float(dest[0]), float(dest[1])),
            radius=float(self.radii[index]),
            vx=float(vel[0]), vy=float(vel[1]),
            acc_x=float(acc[0]), acc_y=float(acc[1]),
            friction=float(self.frictions[index]),
            color=self.color_of(index),
        )
