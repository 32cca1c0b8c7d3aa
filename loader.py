# loader.py
"""
Asynchronous image loading.

Decoding is deferred to the frame scheduler so the caller returns at once
and the pipeline resumes from a callback, the way an image element fires
its load event.
"""
import logging
from abc import ABC, abstractmethod
from typing import Callable

import pygame

from scheduler import FrameScheduler

# --- Data Contracts ---
#
# class ImageLoader (abstract):
#   - load(source: str, on_load: Callable[[image], None],
#          on_error: Callable[[DecodeError], None]) -> None
#     - Side Effects: Eventually calls exactly one of on_load / on_error.
#       The image passed to on_load exposes get_width() / get_height().
#
# class PygameImageLoader(ImageLoader):
#   - __init__(self, scheduler: FrameScheduler)
#   - Decodes with pygame.image.load on the next scheduled frame.


class DecodeError(Exception):
    """Describes an image source that could not be decoded; handed to on_error, never raised."""

    def __init__(self, source: str, reason: str = ""):
        self.source = source
        self.reason = reason
        msg = f"Could not decode image '{source}'"
        super().__init__(f"{msg}: {reason}" if reason else msg)


class ImageLoader(ABC):
    @abstractmethod
    def load(
        self,
        source: str,
        on_load: Callable[[pygame.Surface], None],
        on_error: Callable[[DecodeError], None],
    ) -> None:
        pass


class PygameImageLoader(ImageLoader):
    """
    Loads images from disk with pygame on a later frame.
    """
    def __init__(self, scheduler: FrameScheduler):
        self.scheduler = scheduler

    def load(self, source, on_load, on_error) -> None:
        logging.info(f"Queued image '{source}' for decoding.")

        def decode():
            try:
                image = pygame.image.load(source)
            except (pygame.error, OSError) as e:
                on_error(DecodeError(source, str(e)))
                return
            logging.info(f"Decoded image '{source}' ({image.get_width()}x{image.get_height()}).")
            on_load(image)

        self.scheduler.schedule(decode)
