# particle_field.py

import math
import logging
from collections import namedtuple

import numpy as np
import numba
import pygame

import constants
from field_config import FieldConfig
from particle import PARTICLE_DTYPE, Particle, particle_alpha, connection_alpha

logger = logging.getLogger("particle_field")

# Summary of a rendered frame, used by the animator for throttled logging.
FrameStats = namedtuple('FrameStats', ['frame', 'respawned', 'connections'])


# --- JIT-Compiled Connection Pass ---
# Kept outside the ParticleField class so Numba's nopython mode only sees
# NumPy arrays and scalars.

@numba.jit(nopython=True)
def _find_connections_jit(xs, ys, max_distance, opacity, pairs, alphas):
    """
    Scans every unordered pair (i < j) and records those closer than
    max_distance in `pairs`/`alphas`. Returns the number of pairs written.
    """
    n = xs.shape[0]
    count = 0
    for i in range(n):
        for j in range(i + 1, n):
            dx = xs[j] - xs[i]
            dy = ys[j] - ys[i]
            distance = np.sqrt(dx * dx + dy * dy)
            if distance < max_distance:
                pairs[count, 0] = i
                pairs[count, 1] = j
                alphas[count] = connection_alpha(distance, max_distance, opacity)
                count += 1
    return count


class ParticleField:
    """
    Owns the fixed-size particle pool and renders it into a double buffer.

    Data Contract:
    - Inputs:
        - config (FieldConfig or dict): the recognised field options.
        - rng (np.random.Generator): source of all randomness.
        - size (tuple): the (width, height) of the viewport in pixels.
    - Outputs: `surface`, the visible buffer, updated by `render_frame`.
    - Side Effects: mutates the pool and both buffers in place.
    - Invariants: the pool always holds exactly `config.circle_count`
      records. Radii stay positive. A particle is never kept once it is older
      than its time to live or further than twice its radius outside the
      viewport.
    """
    def __init__(self, config, rng: np.random.Generator, size=(constants.WIDTH, constants.HEIGHT)):
        self.config = FieldConfig.from_dict(config)
        self.rng = rng
        self.width, self.height = self._clamp_size(size)
        self.scroll_offset = 0.0
        self.burst_active = self.config.burst_enabled
        self.base_hue = self.config.base_hue
        self.frame = 0

        count = self.config.circle_count
        self.pool = np.zeros(count, dtype=PARTICLE_DTYPE)

        # Scratch buffers for the connection pass, sized for the worst case.
        max_pairs = max(1, count * (count - 1) // 2)
        self._pairs = np.zeros((max_pairs, 2), dtype=np.int64)
        self._alphas = np.zeros(max_pairs, dtype=np.float64)

        self._create_buffers()

        for i in range(count):
            self._init_particle(i)
            # Stagger ages so the initial pool does not expire all at once.
            self.pool['age'][i] = math.floor(i * self.pool['ttl'][i] / count)

        logger.info(
            f"ParticleField created for {count} particles on a "
            f"{self.width}x{self.height} viewport (burst={'on' if self.burst_active else 'off'})."
        )

    # --- Pool access ---

    def __len__(self):
        return self.pool.shape[0]

    @property
    def particles(self):
        return [Particle(self.pool, i) for i in range(len(self))]

    # --- Setup ---

    @staticmethod
    def _clamp_size(size):
        width, height = size
        return max(1, int(width)), max(1, int(height))

    def _create_buffers(self):
        # `logical` receives particles and lines; `surface` is what the host shows.
        self.logical = pygame.Surface((self.width, self.height), pygame.SRCALPHA)
        self.surface = pygame.Surface((self.width, self.height), pygame.SRCALPHA)

    def _spawn_position(self):
        """Picks a spawn point, biased towards the viewport centre."""
        if self.rng.random() < self.config.center_bias:
            spread_x = self.width * constants.CENTER_SPREAD
            spread_y = self.height * constants.CENTER_SPREAD
            x = self.width / 2 + self.rng.triangular(-1.0, 0.0, 1.0) * spread_x
            y = self.height / 2 + self.rng.triangular(-1.0, 0.0, 1.0) * spread_y
            return x, y
        return self.rng.random() * self.width, self.rng.random() * self.height

    def _init_particle(self, i: int):
        """(Re)initialises record i in place with a fresh state and age 0."""
        cfg = self.config
        x, y = self._spawn_position()

        angle = self.rng.random() * 2 * math.pi
        speed = cfg.base_speed + self.rng.random() * cfg.range_speed
        ttl = cfg.base_ttl + math.floor(self.rng.random() * cfg.range_ttl)

        if self.burst_active:
            base_radius, range_radius = cfg.burst_base_radius, cfg.burst_range_radius
        else:
            base_radius, range_radius = cfg.base_radius, cfg.range_radius
        radius = (base_radius + self.rng.random() * range_radius) * constants.RADIUS_SCALE

        record = self.pool[i]
        record['x'] = x
        record['y'] = y
        record['vx'] = math.cos(angle) * speed
        record['vy'] = math.sin(angle) * speed
        record['age'] = 0.0
        record['ttl'] = ttl
        record['radius'] = radius
        record['hue'] = self.base_hue + self.rng.random() * cfg.range_hue

    # --- Host notifications ---

    def resize(self, width, height):
        """Adopts a new viewport size; the very next frame uses the new bounds."""
        self.width, self.height = self._clamp_size((width, height))
        self._create_buffers()
        logger.info(f"ParticleField resized to {self.width}x{self.height}.")

    def set_scroll_offset(self, offset):
        self.scroll_offset = float(offset)

    def end_burst(self):
        if self.burst_active:
            self.burst_active = False
            logger.info("Burst phase finished; particles settle to steady state.")

    # --- Physics ---

    def _out_of_bounds_mask(self):
        """Vectorised bounds check with an inclusive 2 x radius tolerance."""
        pad = self.pool['radius'] * constants.BOUNDS_PADDING_FACTOR
        xs, ys = self.pool['x'], self.pool['y']
        return (
            (xs < -pad) | (xs > self.width + pad) |
            (ys < -pad) | (ys > self.height + pad)
        )

    def step(self):
        """
        Advances every particle by one frame and reinitialises the ones that
        expired or left the padded viewport.

        Returns the number of particles reinitialised.
        """
        pool = self.pool
        age_step = self.config.burst_speed_multiplier if self.burst_active else 1.0
        pool['age'] += age_step

        young = pool['age'] < constants.GROWTH_FRAMES
        pool['radius'][young] *= constants.GROWTH_RATE

        pool['x'] += pool['vx']
        pool['y'] += pool['vy']

        dead = self._out_of_bounds_mask() | (pool['age'] > pool['ttl'])
        dead_indices = np.flatnonzero(dead)
        for i in dead_indices:
            self._init_particle(int(i))

        self.base_hue += self.config.hue_drift
        return len(dead_indices)

    # --- Connections ---

    def connections(self):
        """Returns [(i, j, alpha)] for every pair closer than connection_distance."""
        max_distance = self.config.connection_distance
        if max_distance <= 0 or len(self) < 2:
            return []
        count = _find_connections_jit(
            np.ascontiguousarray(self.pool['x']),
            np.ascontiguousarray(self.pool['y']),
            max_distance,
            constants.CONNECTION_OPACITY,
            self._pairs,
            self._alphas,
        )
        return [
            (int(self._pairs[k, 0]), int(self._pairs[k, 1]), float(self._alphas[k]))
            for k in range(count)
        ]

    # --- Rendering ---

    @property
    def parallax_offset(self):
        return self.scroll_offset * self.config.parallax_strength

    def _draw_particles(self, surface, offset):
        for i in range(len(self)):
            record = self.pool[i]
            alpha = particle_alpha(record['age'], record['ttl'])
            if alpha <= 0:
                continue
            pygame.draw.circle(
                surface,
                (*constants.WHITE, int(alpha * 255)),
                (int(record['x']), int(record['y'] - offset)),
                max(1, int(record['radius']))
            )

    def _draw_connections(self, surface, offset):
        links = self.connections()
        xs, ys = self.pool['x'], self.pool['y']
        for i, j, alpha in links:
            pygame.draw.line(
                surface,
                (*constants.WHITE, int(alpha * 255)),
                (int(xs[i]), int(ys[i] - offset)),
                (int(xs[j]), int(ys[j] - offset)),
                constants.CONNECTION_WIDTH
            )
        return len(links)

    def _blurred(self, surface):
        """Approximates a Gaussian blur by downscaling and smoothly upscaling back."""
        scale = self.config.blur_amount
        if scale <= 1:
            return surface.copy()
        scaled_size = (max(1, int(self.width / scale)), max(1, int(self.height / scale)))
        scaled_surface = pygame.transform.smoothscale(surface, scaled_size)
        return pygame.transform.smoothscale(scaled_surface, (self.width, self.height))

    def render_frame(self, layer_opacity: float = 1.0) -> FrameStats:
        """
        Runs one full frame: draw, advance, reinitialise, connect, composite.

        The parallax offset only shifts where particles are drawn; stored
        positions and the bounds check are unaffected.
        """
        self.logical.fill(constants.TRANSPARENT)
        self.surface.fill(self.config.background_color)

        offset = self.parallax_offset
        self._draw_particles(self.logical, offset)
        respawned = self.step()
        connections = self._draw_connections(self.logical, offset)

        blurred = self._blurred(self.logical)
        blurred.set_alpha(int(255 * constants.COMPOSITE_ALPHA * max(0.0, min(1.0, layer_opacity))))
        self.surface.blit(blurred, (0, 0))

        self.frame += 1
        return FrameStats(self.frame, respawned, connections)
