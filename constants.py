# constants.py
"""
Application-level constants.

These values are static and do not change between runs. They cover the
defaults of the pixelizer options, the fixed physics divisors and the
rendering properties of the pygame window.
"""
import pygame

# --- Option Defaults ---
DEFAULT_PIXEL_RADIUS = 0
DEFAULT_AMOUNT = 150
# Alpha values (0-255) above this mark a grid cell as part of the image.
DEFAULT_THRESHOLD = 150
DEFAULT_COLORS = ("#FFFFFF",)
DEFAULT_DISTRIBUTION = 5
DEFAULT_FRICTION_VALUE = 1
DEFAULT_AUTOSTOP = 100
DEFAULT_SPEED = 10

# --- Particle Kinematics ---
# Every particle is at least this big, pixel_radius only adds to it.
BASE_PARTICLE_RADIUS = 2
# Lower bound of the per-particle friction coefficient.
BASE_FRICTION = 0.94
# friction_value is given in percent of a friction coefficient.
FRICTION_VALUE_SCALE = 100
# In friction mode the pull towards the destination is divided by this.
FRICTION_ACCELERATION_DIVISOR = 1000

# --- Blend Modes ---
BLEND_SOURCE_OVER = "source-over"
BLEND_SCREEN = "screen"
# Map of canvas composite operations to pygame blit flags.
# pygame has no true "screen" operator, additive blending is the closest.
BLEND_FLAGS = {
    BLEND_SOURCE_OVER: 0,
    BLEND_SCREEN: pygame.BLEND_RGBA_ADD,
    "lighter": pygame.BLEND_RGBA_ADD,
}

# --- Visualization Settings ---
FPS = 60
WINDOW_TITLE = "Pixelizer"
BACKGROUND_COLOR = (24, 24, 24)  # Dark Gray
FALLBACK_WINDOW_SIZE = (1280, 720)

# Rule 2.4: Hot loops must throttle logs.
LOG_THROTTLE_TICKS = 25
