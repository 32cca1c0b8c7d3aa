# main.py
"""
Main entry point for the Pixelizer.

This script orchestrates the whole lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Opens the pygame window and builds the platform services.
4. Creates the Pixelizer and runs the frame loop until the animation stops.
5. Handles clean shutdown.
"""
import cProfile
import io
import logging
import pstats
import sys

import pygame

from constants import BACKGROUND_COLOR, FALLBACK_WINDOW_SIZE, FPS, WINDOW_TITLE
from loader import PygameImageLoader
from pixelizer import Pixelizer
from scheduler import PygameFrameScheduler
from utils import load_config, resolve_source, setup_logging
from visualization import PygameSurface, display_viewport


def open_window(window_params: dict) -> pygame.Surface:
    """Opens the display, borderless fullscreen unless configured otherwise."""
    pygame.display.set_caption(window_params.get('title', WINDOW_TITLE))
    if window_params.get('fullscreen', True):
        return pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
    size = tuple(window_params.get('size', FALLBACK_WINDOW_SIZE))
    return pygame.display.set_mode(size)


def main(config_path: str = 'config.json') -> int:
    """
    Runs the pixelizer configured in config_path. Returns the exit code.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config(config_path)
    except Exception as e:
        print(f"FATAL: Could not load {config_path}. Error: {e}")
        return 1

    setup_logging(config)
    logging.info("--- Pixelizer Starting ---")

    pixelizer_params = config.get('pixelizer', {})
    window_params = config.get('window', {})
    run_params = config.get('run_control', {})

    pygame.init()
    window = open_window(window_params)

    scheduler = PygameFrameScheduler(fps=window_params.get('fps', FPS))
    surface = PygameSurface(
        window=window,
        background_color=tuple(window_params.get('background_color', BACKGROUND_COLOR))
    )

    try:
        engine = Pixelizer(
            surface,
            resolve_source(config_path, pixelizer_params.get('src')),
            pixelizer_params.get('options', {}),
            scheduler=scheduler,
            loader=PygameImageLoader(scheduler),
            viewport=display_viewport,
            on_error=lambda error: logging.error(f"Nothing to show: {error}"),
        )
    except ValueError:
        pygame.quit()
        return 1

    if not engine.is_ready:
        logging.error("Pixelizer needs a surface and an image source ('pixelizer.src').")
        pygame.quit()
        return 1

    profiler = cProfile.Profile() if run_params.get('profile', False) else None
    if profiler is not None:
        profiler.enable()
    scheduler.run(present=surface.present, max_frames=run_params.get('max_frames'))
    if profiler is not None:
        profiler.disable()
    if run_params.get('hold_last_frame', True):
        scheduler.idle_until_quit(present=surface.present)

    logging.info(f"Animation finished in state '{engine.state.value}' after {engine.ticks_rendered} ticks.")

    if profiler is not None:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        # Sort by cumulative time spent in the function
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)
        logging.info(f"\n{s.getvalue()}")

    pygame.quit()
    logging.info("--- Pixelizer Shutting Down ---")
    return 0


if __name__ == "__main__":
    sys.exit(main(*sys.argv[1:2]))
