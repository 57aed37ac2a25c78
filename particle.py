# particle.py

import numpy as np
import numba
import constants

# One record per particle. The pool is a fixed-length array of these records,
# allocated once and mutated in place every frame.
PARTICLE_DTYPE = np.dtype([
    ('x', np.float64),
    ('y', np.float64),
    ('vx', np.float64),
    ('vy', np.float64),
    ('age', np.float64),
    ('ttl', np.float64),
    ('radius', np.float64),
    ('hue', np.float64),
])


def fade_in_out(age: float, ttl: float) -> float:
    """
    Smoothstep envelope over a particle's lifetime.

    The age is folded into a triangular phase u (0 at birth, 1 at mid-life,
    0 at expiry) and eased with 3u^2 - 2u^3, so the result ramps up from 0,
    peaks once at ttl / 2 and ramps back down to 0 at ttl.
    """
    if ttl <= 0:
        return 0.0
    half = 0.5 * ttl
    u = abs(((age + half) % ttl) - half) / half
    return 3.0 * u * u - 2.0 * u * u * u


def particle_alpha(age: float, ttl: float) -> float:
    """Final draw alpha: the fade envelope under the (pre-fade aware) opacity ceiling."""
    if ttl - age < constants.PRE_FADE_FRAMES:
        ceiling = constants.PRE_FADE_OPACITY
    else:
        ceiling = constants.BASE_OPACITY
    return fade_in_out(age, ttl) * ceiling


@numba.jit(nopython=True)
def connection_alpha(distance, max_distance, opacity):
    """Alpha of a line between two particles; 0 at or beyond max_distance."""
    if distance < max_distance:
        return (1.0 - distance / max_distance) * opacity
    return 0.0


class Particle:
    """
    A read/write view over one record of the particle pool.

    Holding a Particle does not copy anything: reading an attribute reads the
    pool, and assigning one writes straight into it.
    """
    __slots__ = ('_pool', 'index')

    def __init__(self, pool: np.ndarray, index: int):
        self._pool = pool
        self.index = index

    @property
    def _record(self):
        return self._pool[self.index]

    @property
    def position(self):
        record = self._record
        return (float(record['x']), float(record['y']))

    @position.setter
    def position(self, value):
        self._pool['x'][self.index], self._pool['y'][self.index] = value

    @property
    def velocity(self):
        record = self._record
        return (float(record['vx']), float(record['vy']))

    @velocity.setter
    def velocity(self, value):
        self._pool['vx'][self.index], self._pool['vy'][self.index] = value

    @property
    def age(self):
        return float(self._record['age'])

    @age.setter
    def age(self, value):
        self._pool['age'][self.index] = value

    @property
    def time_to_live(self):
        return float(self._record['ttl'])

    @time_to_live.setter
    def time_to_live(self, value):
        self._pool['ttl'][self.index] = value

    @property
    def radius(self):
        return float(self._record['radius'])

    @radius.setter
    def radius(self, value):
        self._pool['radius'][self.index] = value

    @property
    def hue(self):
        return float(self._record['hue'])

    @property
    def alpha(self):
        return particle_alpha(self.age, self.time_to_live)

    def __repr__(self):
        x, y = self.position
        return (f"Particle(index={self.index}, pos=({x:.1f}, {y:.1f}), "
                f"age={self.age:.0f}/{self.time_to_live:.0f}, radius={self.radius:.2f})")
