# pixelizer.py
"""
The Pixelizer animation engine.

A Pixelizer binds to a drawing surface, samples an image into particle
destinations and runs a bounded, self-rescheduling render loop on a frame
scheduler. The pipeline is strictly ordered:

1. Configuration and surface binding (construction).
2. Image sampling, after the asynchronous decode completes.
3. Particle creation from the sampled pixels.
4. The render loop, until autostop ticks have been drawn.
"""
import logging
from enum import Enum
from typing import Callable, Optional, Tuple

import numpy as np

from constants import LOG_THROTTLE_TICKS
from loader import DecodeError, ImageLoader
from options import PixelizerOptions
from particle import ParticleSystem
from sampler import sample_image
from scheduler import FrameScheduler
from simulation import Simulation
from visualization import Surface

# --- Data Contracts ---
#
# class Pixelizer:
#   - __init__(self, surface, src, options=None, *, scheduler, loader, viewport, on_error=None):
#     - Inputs:
#       - surface: Optional[Surface]. None gives an inert instance.
#       - src: Optional[str], image source. None gives an inert instance.
#       - options: PixelizerOptions or a mapping accepted by
#         PixelizerOptions.from_dict.
#       - viewport: Callable[[], Tuple[int, int]], queried once.
#     - Side Effects: Sizes the surface to the viewport. Calls init() when
#       options.autoinit is set.
#
#   - init(self) -> None: (re)starts the pipeline from image loading.
#   - tick(self) -> None: one render loop iteration.
#   - is_stopped(self) -> bool
#
#   - Invariants:
#     - width and height never change after construction.
#     - ticks_rendered <= options.autostop.
#     - STOPPED is terminal until init() is called again.


class EngineState(Enum):
    INERT = "inert"
    IDLE = "idle"
    WAITING = "waiting"
    RUNNING = "running"
    STOPPED = "stopped"


class Pixelizer:
    """
    Renders an image as a swarm of particles settling into place.
    """
    def __init__(
        self,
        surface: Optional[Surface],
        src: Optional[str],
        options=None,
        *,
        scheduler: FrameScheduler,
        loader: ImageLoader,
        viewport: Callable[[], Tuple[int, int]],
        on_error: Optional[Callable[[DecodeError], None]] = None,
    ):
        if not isinstance(options, PixelizerOptions):
            options = PixelizerOptions.from_dict(options)
        self.options = options
        self.surface = surface
        self.src = src
        self.scheduler = scheduler
        self.loader = loader
        self.on_error = on_error

        self.pixels: Optional[np.ndarray] = None
        self.particles = ParticleSystem.empty(options.colors)
        self.simulation: Optional[Simulation] = None
        self.tick_counter = 0
        # Each init() starts a new run; ticks scheduled by an older run are dropped.
        self._run_id = 0
        self.rng = np.random.default_rng(options.seed)
        self.width = 0
        self.height = 0

        if surface is None or src is None:
            logging.warning(f"Pixelizer is inert: surface={surface!r}, src={src!r}.")
            self.state = EngineState.INERT
            return

        width, height = viewport()
        surface.set_size(width, height)
        self.width, self.height = surface.width, surface.height
        self.state = EngineState.IDLE
        logging.info(f"Pixelizer bound to a {self.width}x{self.height} surface for '{src}'.")

        if options.autoinit:
            self.init()

    @property
    def is_ready(self) -> bool:
        return self.state is not EngineState.INERT

    @property
    def ticks_rendered(self) -> int:
        return min(self.tick_counter, self.options.autostop)

    def is_stopped(self) -> bool:
        return self.state is EngineState.STOPPED

    def init(self) -> None:
        """
        Starts the pipeline: clears the surface and loads the image.

        Any particles of a previous run are discarded.
        """
        if not self.is_ready:
            logging.warning("init() called on an inert Pixelizer, ignoring.")
            return
        self.pixels = None
        self.particles = ParticleSystem.empty(self.options.colors)
        self.simulation = None
        self.tick_counter = 0
        self._run_id += 1
        self.state = EngineState.WAITING

        self.surface.clear()
        run_id = self._run_id
        self.loader.load(
            self.src,
            lambda image: self._on_image_loaded(image, run_id),
            lambda error: self._on_decode_error(error, run_id)
        )

    def _on_image_loaded(self, image, run_id: int) -> None:
        if run_id != self._run_id:
            logging.debug("Ignoring image decoded for a superseded run.")
            return
        self.pixels = sample_image(self.surface, image)
        self.particles = ParticleSystem.from_pixels(
            self.pixels, self.width, self.height, self.options, self.rng
        )
        self.simulation = Simulation(self.particles, self.options)
        self.state = EngineState.RUNNING
        logging.info(f"Render loop starting, autostop after {self.options.autostop} ticks.")
        self.tick()

    def _on_decode_error(self, error: DecodeError, run_id: int) -> None:
        if run_id != self._run_id:
            logging.debug(f"Ignoring decode failure of a superseded run: {error}")
            return
        # The engine keeps waiting; there is no retry.
        logging.error(f"{error}. Pixelizer stays waiting.")
        if self.on_error is not None:
            self.on_error(error)

    def tick(self) -> None:
        """
        Runs one iteration of the render loop and schedules the next one.
        """
        if self.state is not EngineState.RUNNING:
            return
        self.tick_counter += 1
        if self.tick_counter > self.options.autostop:
            self.state = EngineState.STOPPED
            logging.info(f"Reached autostop ({self.options.autostop}). Render loop stopped.")
            return

        run_id = self._run_id
        self.scheduler.schedule(lambda: self._scheduled_tick(run_id))
        self.surface.clear()
        self.simulation.step()
        self.simulation.draw(self.surface)

        # Rule 2.4: Hot loops must throttle logs
        if self.tick_counter % LOG_THROTTLE_TICKS == 0:
            logging.debug(f"Tick {self.tick_counter}/{self.options.autostop}")

    def _scheduled_tick(self, run_id: int) -> None:
        if run_id == self._run_id:
            self.tick()
