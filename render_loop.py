# render_loop.py

"""
Frame scheduling for the particle field.

A RenderLoop hands out one-shot frame requests (a callback registered now runs
on the next tick and must be re-requested to run again), one-shot timers and
event listeners. The animator only talks to this interface, so it runs the
same under a pygame window (PygameRenderLoop) and under a deterministic clock
(ManualRenderLoop).
"""

import heapq
import logging
import itertools
from collections import defaultdict

import pygame

import constants

logger = logging.getLogger("particle_field")

RESIZE = "resize"
SCROLL = "scroll"


class RenderLoop:
    """
    Base scheduler. Subclasses provide `now()` (milliseconds).

    Data Contract:
    - Inputs: callbacks registered through request_frame / call_later /
      add_listener.
    - Outputs: None. Callbacks are invoked from `tick()` and `dispatch()`.
    - Invariants: all callbacks run on the calling thread, one at a time.
      A frame callback runs at most once per request.
    """
    def __init__(self, surface=None):
        self.surface = surface
        self.frame_count = 0
        self._handles = itertools.count(1)
        self._frame_callbacks = {}
        self._timers = []
        self._timer_callbacks = {}
        self._listeners = defaultdict(list)

    def now(self) -> float:
        raise NotImplementedError

    # --- Frame requests ---

    def request_frame(self, callback) -> int:
        handle = next(self._handles)
        self._frame_callbacks[handle] = callback
        return handle

    def cancel_frame(self, handle):
        self._frame_callbacks.pop(handle, None)

    @property
    def pending_frames(self):
        return len(self._frame_callbacks)

    # --- One-shot timers ---

    def call_later(self, delay_ms, callback) -> int:
        handle = next(self._handles)
        self._timer_callbacks[handle] = callback
        heapq.heappush(self._timers, (self.now() + max(0.0, delay_ms), handle))
        return handle

    def cancel_timer(self, handle):
        # The heap entry stays until it comes due and is then skipped.
        self._timer_callbacks.pop(handle, None)

    @property
    def pending_timers(self):
        return len(self._timer_callbacks)

    def _run_due_timers(self):
        now = self.now()
        while self._timers and self._timers[0][0] <= now:
            _, handle = heapq.heappop(self._timers)
            callback = self._timer_callbacks.pop(handle, None)
            if callback is not None:
                callback()

    # --- Events ---

    def add_listener(self, event_type, callback):
        self._listeners[event_type].append(callback)

    def remove_listener(self, event_type, callback):
        listeners = self._listeners.get(event_type, [])
        if callback in listeners:
            listeners.remove(callback)

    def listener_count(self, event_type=None):
        if event_type is not None:
            return len(self._listeners.get(event_type, []))
        return sum(len(callbacks) for callbacks in self._listeners.values())

    def dispatch(self, event_type, *args):
        for callback in list(self._listeners.get(event_type, [])):
            callback(*args)

    # --- Ticking ---

    def tick(self):
        """
        Runs due timers, then every frame callback requested before this tick.
        Callbacks requested while the tick runs are kept for the next one.
        """
        self._run_due_timers()
        callbacks, self._frame_callbacks = self._frame_callbacks, {}
        timestamp = self.now()
        for callback in callbacks.values():
            callback(timestamp)
        self.frame_count += 1


class ManualRenderLoop(RenderLoop):
    """Deterministic loop driven by explicit `step()` / `advance()` calls."""
    def __init__(self, frame_ms=1000.0 / constants.FPS, surface=None):
        super().__init__(surface)
        self.frame_ms = frame_ms
        self._clock_ms = 0.0

    def now(self) -> float:
        return self._clock_ms

    def advance(self, ms):
        """Moves the clock forward and fires any timers that became due."""
        self._clock_ms += ms
        self._run_due_timers()

    def step(self, frames=1):
        for _ in range(frames):
            self._clock_ms += self.frame_ms
            self.tick()


class PygameRenderLoop(RenderLoop):
    """
    Drives a pygame window: translates window events into resize/scroll
    notifications, paints the page colour, ticks and flips the display.
    """
    def __init__(self, screen: pygame.Surface, clock: pygame.time.Clock,
                 fps=constants.FPS, page_color=constants.PAGE_COLOR, scroll_step=constants.SCROLL_STEP):
        super().__init__(screen)
        self.clock = clock
        self.fps = fps
        self.page_color = tuple(page_color)
        self.scroll_step = scroll_step
        self.scroll_offset = 0.0
        self.running = False

    def now(self) -> float:
        return float(pygame.time.get_ticks())

    def _handle_event(self, event):
        if event.type == pygame.QUIT:
            self.running = False
        elif event.type == pygame.VIDEORESIZE:
            self.surface = pygame.display.get_surface()
            self.dispatch(RESIZE, event.w, event.h)
        elif event.type == pygame.MOUSEWHEEL:
            self.scroll_offset = max(0.0, self.scroll_offset - event.y * self.scroll_step)
            self.dispatch(SCROLL, self.scroll_offset)

    def run(self, max_frames=None):
        """Runs until the window is closed (or max_frames ticks have passed)."""
        self.running = True
        logger.info(f"Render loop started at {self.fps} FPS.")
        while self.running and (max_frames is None or self.frame_count < max_frames):
            for event in pygame.event.get():
                self._handle_event(event)
            if not self.running:
                break
            self.surface.fill(self.page_color)
            self.tick()
            pygame.display.flip()
            self.clock.tick(self.fps)
        self.running = False
        logger.info(f"Render loop stopped after {self.frame_count} frames.")
