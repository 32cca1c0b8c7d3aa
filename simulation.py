# simulation.py
"""
Handles the per-frame physics of the particles.

This module defines the Simulation class, which advances every particle one
step towards its destination and draws it. Two kinematic models exist: a
linear approach whose rate is set by the speed option, and a damped model
driven by each particle's friction coefficient.
"""
import logging

import numpy as np
from numba import jit

from constants import FRICTION_ACCELERATION_DIVISOR
from options import PixelizerOptions
from particle import ParticleSystem
from visualization import Surface

# --- Data Contracts ---
#
# class Simulation:
#   - __init__(self, particles: ParticleSystem, options: PixelizerOptions):
#     - Side Effects: Stores references, chooses the kinematic model.
#
#   - step(self) -> None:
#     - Side Effects: Updates positions and accelerations (and velocities
#       in friction mode) of every particle in place.
#     - Invariants: Particle count and destinations remain constant.
#       Particles do not interact; each row is updated on its own.
#
#   - draw(self, surface: Surface) -> None:
#     - Side Effects: Fills one circle per particle, in creation order.


@jit(nopython=True)
def _step_linear_numba(positions, destinations, accelerations, speed):
    """
    Numba-jitted first-order approach: each step covers 1/speed of the
    remaining distance.
    """
    for i in range(positions.shape[0]):
        for k in range(2):
            accelerations[i, k] = (destinations[i, k] - positions[i, k]) / speed
            positions[i, k] += accelerations[i, k]


@jit(nopython=True)
def _step_friction_numba(positions, destinations, velocities, accelerations, frictions, divisor):
    """
    Numba-jitted damped approach. Velocity keeps its momentum, gains a small
    pull towards the destination and then decays by the particle's friction.
    """
    for i in range(positions.shape[0]):
        friction = frictions[i]
        for k in range(2):
            accelerations[i, k] = (destinations[i, k] - positions[i, k]) / divisor
            velocities[i, k] += accelerations[i, k]
            velocities[i, k] *= friction
            positions[i, k] += velocities[i, k]


class Simulation:
    """
    Advances and draws the particle system once per tick.
    """
    def __init__(self, particles: ParticleSystem, options: PixelizerOptions):
        self.particles = particles
        self.friction = options.friction
        self.speed = np.float64(options.speed)
        self.divisor = np.float64(FRICTION_ACCELERATION_DIVISOR)
        model = "friction" if self.friction else f"linear (speed {options.speed})"
        logging.info(f"Simulation initialized for {len(particles)} particles, {model} model.")

    def step(self) -> None:
        """
        Executes one time step of the simulation.
        """
        p = self.particles
        if len(p) == 0:
            return
        if self.friction:
            _step_friction_numba(
                p.positions, p.destinations, p.velocities,
                p.accelerations, p.frictions, self.divisor
            )
        else:
            _step_linear_numba(p.positions, p.destinations, p.accelerations, self.speed)

    def draw(self, surface: Surface) -> None:
        p = self.particles
        for i in range(p.particle_count):
            pos = p.positions[i]
            surface.fill_circle(pos[0], pos[1], p.radii[i], p.colors[p.color_indices[i]])
