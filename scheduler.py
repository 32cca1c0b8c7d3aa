# scheduler.py
"""
Frame scheduling for the render loop.

A callback handed to a FrameScheduler runs once, on a later frame. Nothing
here blocks inside a callback: the scheduler owns the loop and the engine
only ever asks for its next frame.
"""
import logging
from abc import ABC, abstractmethod
from collections import deque
from typing import Callable, Deque, Optional

import pygame

from constants import FPS

# --- Data Contracts ---
#
# class FrameScheduler (abstract):
#   - schedule(callback: Callable[[], None]) -> None
#     - Side Effects: Queues callback for the next frame. Callbacks scheduled
#       while a frame runs belong to the following frame.
#
# class ManualFrameScheduler(FrameScheduler):
#   - run_pending() -> int: runs one frame worth of callbacks, returns how many ran.
#   - run_until_idle(max_frames: Optional[int] = None) -> int: returns frames run.
#
# class PygameFrameScheduler(ManualFrameScheduler):
#   - run(present=None, max_frames=None) -> int:
#     - Side Effects: Runs frames paced by a pygame Clock until the queue is
#       empty, the window is closed or max_frames is reached.

Callback = Callable[[], None]


class FrameScheduler(ABC):
    """
    Runs callbacks approximately once per display refresh.
    """

    @abstractmethod
    def schedule(self, callback: Callback) -> None:
        pass


class ManualFrameScheduler(FrameScheduler):
    """
    A scheduler whose frames are advanced explicitly by the caller.
    """
    def __init__(self):
        self._pending: Deque[Callback] = deque()
        self.frame_count = 0

    @property
    def pending(self) -> int:
        return len(self._pending)

    def schedule(self, callback: Callback) -> None:
        self._pending.append(callback)

    def run_pending(self) -> int:
        """Runs the callbacks queued before this frame started."""
        batch = list(self._pending)
        self._pending.clear()
        for callback in batch:
            callback()
        if batch:
            self.frame_count += 1
        return len(batch)

    def run_until_idle(self, max_frames: Optional[int] = None) -> int:
        """Runs frames until no callback is pending or max_frames is reached."""
        frames = 0
        while self._pending and (max_frames is None or frames < max_frames):
            self.run_pending()
            frames += 1
        return frames


class PygameFrameScheduler(ManualFrameScheduler):
    """
    Paces queued callbacks with a pygame Clock at a fixed frame rate.
    """
    def __init__(self, fps: int = FPS):
        super().__init__()
        self.fps = fps
        self.clock = pygame.time.Clock()
        self.quit_requested = False

    def _quit_requested(self) -> bool:
        if self.quit_requested:
            return True
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Stopping frame loop.")
                self.quit_requested = True
                return True
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                logging.info("ESC key pressed. Stopping frame loop.")
                self.quit_requested = True
                return True
        return False

    def run(self, present: Optional[Callback] = None, max_frames: Optional[int] = None) -> int:
        """
        Runs the frame loop.

        Args:
            present (Optional[Callable]): Called after every frame, typically
                to flip the display.
            max_frames (Optional[int]): Upper bound on frames to run.

        Returns:
            int: The number of frames that ran.
        """
        frames = 0
        while self._pending and (max_frames is None or frames < max_frames):
            if self._quit_requested():
                break
            self.run_pending()
            if present is not None:
                present()
            frames += 1
            self.clock.tick(self.fps)
        logging.info(f"Frame loop finished after {frames} frames.")
        return frames

    def idle_until_quit(self, present: Optional[Callback] = None) -> None:
        """Keeps the last frame on screen until the window is closed."""
        logging.info("Animation settled. Close the window or press ESC to exit.")
        while not self._quit_requested():
            if present is not None:
                present()
            self.clock.tick(self.fps)
