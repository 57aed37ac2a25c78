# animator.py

import logging
from contextlib import ExitStack, contextmanager

import numpy as np

import constants
from field_config import FieldConfig
from particle_field import ParticleField
from render_loop import RESIZE, SCROLL

logger = logging.getLogger("particle_field")


class ParticleFieldAnimator:
    """
    Binds a ParticleField to a RenderLoop for the lifetime of a mount.

    Data Contract:
    - Inputs:
        - config (dict or FieldConfig): field options, see field_config.
        - rng (np.random.Generator): optional; a fresh generator otherwise.
        - size (tuple): initial (width, height) of the viewport.
    - Outputs: None. Each frame the field's visible buffer is blitted onto
      the loop's surface when the loop has one.
    - Side Effects: registers listeners, timers and frame requests on the
      loop between start() and stop().
    - Invariants: after stop() returns, nothing registered by start() remains
      on the loop, so the field is never touched again by the loop.
    """
    def __init__(self, config=None, rng=None, size=(constants.WIDTH, constants.HEIGHT)):
        self.config = FieldConfig.from_dict(config or {})
        self.field = ParticleField(self.config, rng if rng is not None else np.random.default_rng(), size)
        self.visible = False
        self.opacity = 0.0
        self.last_stats = None
        self._loop = None
        self._frame_handle = None
        self._last_timestamp = None
        self._resources = None

    @property
    def running(self):
        return self._resources is not None

    def start(self, loop):
        """Registers everything the animation needs on `loop`."""
        if self.running:
            logger.warning("Animator already started; ignoring start().")
            return

        with ExitStack() as stack:
            loop.add_listener(RESIZE, self._on_resize)
            stack.callback(loop.remove_listener, RESIZE, self._on_resize)
            loop.add_listener(SCROLL, self._on_scroll)
            stack.callback(loop.remove_listener, SCROLL, self._on_scroll)

            reveal = loop.call_later(self.config.initial_delay, self._reveal)
            stack.callback(loop.cancel_timer, reveal)
            if self.config.burst_enabled:
                burst = loop.call_later(self.config.burst_duration, self.field.end_burst)
                stack.callback(loop.cancel_timer, burst)

            self._loop = loop
            stack.callback(self._release_loop)
            self._frame_handle = loop.request_frame(self._on_frame)
            self._resources = stack.pop_all()

        logger.info(f"Animator mounted with {len(self.field)} particles.")

    def stop(self):
        """Cancels the pending frame, timers and listeners. Safe to call twice."""
        if not self.running:
            return
        resources, self._resources = self._resources, None
        resources.close()
        logger.info(f"Animator unmounted after {self.field.frame} frames.")

    @contextmanager
    def mounted(self, loop):
        self.start(loop)
        try:
            yield self
        finally:
            self.stop()

    def _release_loop(self):
        if self._frame_handle is not None:
            self._loop.cancel_frame(self._frame_handle)
            self._frame_handle = None
        self._loop = None
        self._last_timestamp = None

    # --- Loop callbacks ---

    def _reveal(self):
        self.visible = True
        logger.info("Particle layer revealed.")

    def _on_resize(self, width, height):
        self.field.resize(width, height)

    def _on_scroll(self, offset):
        self.field.set_scroll_offset(offset)

    def _advance_opacity(self, timestamp):
        elapsed = 0.0 if self._last_timestamp is None else timestamp - self._last_timestamp
        self._last_timestamp = timestamp
        if self.visible and self.opacity < 1.0:
            self.opacity = min(1.0, self.opacity + elapsed / constants.FADE_IN_MS)

    def _on_frame(self, timestamp):
        if not self.running:
            return
        self._frame_handle = None
        self._advance_opacity(timestamp)

        stats = self.field.render_frame(self.opacity)
        self.last_stats = stats
        if self._loop.surface is not None:
            self._loop.surface.blit(self.field.surface, (0, 0))

        if stats.frame % constants.STATS_LOG_INTERVAL == 0:
            logger.debug(
                f"Frame={stats.frame}, "
                f"Respawned={stats.respawned}, "
                f"Connections={stats.connections}, "
                f"MeanAge={self.field.pool['age'].mean():.1f}, "
                f"Opacity={self.opacity:.2f}, "
                f"Burst={self.field.burst_active}"
            )

        if self.running:
            self._frame_handle = self._loop.request_frame(self._on_frame)
