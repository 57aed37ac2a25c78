# test_particle.py

import math

import numpy as np
import pytest

import constants
from particle import PARTICLE_DTYPE, Particle, fade_in_out, particle_alpha, connection_alpha


class TestFadeInOut:
    def test_zero_at_birth_and_expiry(self):
        for ttl in (1, 10, 37, 500):
            assert fade_in_out(0, ttl) == 0.0
            assert fade_in_out(ttl, ttl) == 0.0

    def test_peak_at_mid_life(self):
        assert fade_in_out(5, 10) == pytest.approx(1.0)
        assert fade_in_out(250, 500) == pytest.approx(1.0)

    def test_single_interior_maximum(self):
        ttl = 40
        values = [fade_in_out(age, ttl) for age in range(ttl + 1)]
        peak = values.index(max(values))
        assert peak == ttl // 2
        assert all(a < b for a, b in zip(values[:peak], values[1:peak + 1]))
        assert all(a > b for a, b in zip(values[peak:-1], values[peak + 1:]))

    def test_pure_function(self):
        assert fade_in_out(123, 456) == fade_in_out(123, 456)

    def test_non_positive_ttl_is_invisible(self):
        assert fade_in_out(3, 0) == 0.0
        assert fade_in_out(3, -5) == 0.0

    def test_smoothstep_shape(self):
        # u = 0.5 at a quarter of the lifetime
        assert fade_in_out(25, 100) == pytest.approx(3 * 0.25 - 2 * 0.125)


class TestParticleAlpha:
    def test_base_opacity_away_from_expiry(self):
        assert particle_alpha(250, 500) == pytest.approx(constants.BASE_OPACITY)

    def test_pre_fade_in_final_frames(self):
        age, ttl = 450, 500
        expected = fade_in_out(age, ttl) * constants.PRE_FADE_OPACITY
        assert particle_alpha(age, ttl) == pytest.approx(expected)
        assert particle_alpha(age, ttl) < fade_in_out(age, ttl) * constants.BASE_OPACITY


class TestConnectionAlpha:
    def test_linear_falloff(self):
        assert connection_alpha(0.0, 100.0, 0.15) == pytest.approx(0.15)
        assert connection_alpha(50.0, 100.0, 0.15) == pytest.approx(0.075)

    def test_zero_at_and_beyond_limit(self):
        assert connection_alpha(100.0, 100.0, 0.15) == 0.0
        assert connection_alpha(150.0, 100.0, 0.15) == 0.0

    def test_zero_distance_limit_never_connects(self):
        assert connection_alpha(0.0, 0.0, 0.15) == 0.0


class TestParticleView:
    def test_reads_and_writes_through_to_pool(self):
        pool = np.zeros(3, dtype=PARTICLE_DTYPE)
        p = Particle(pool, 1)
        p.position = (10.0, 20.0)
        p.velocity = (1.5, -0.5)
        p.age = 7
        p.time_to_live = 30
        p.radius = 2.5

        assert pool['x'][1] == 10.0 and pool['y'][1] == 20.0
        assert pool['vx'][1] == 1.5 and pool['vy'][1] == -0.5
        assert pool['age'][1] == 7 and pool['ttl'][1] == 30
        assert pool['radius'][1] == 2.5
        assert pool['x'][0] == 0.0 and pool['x'][2] == 0.0

        pool['x'][1] = 99.0
        assert p.position == (99.0, 20.0)

    def test_alpha_matches_pool_state(self):
        pool = np.zeros(1, dtype=PARTICLE_DTYPE)
        p = Particle(pool, 0)
        p.age, p.time_to_live = 250, 500
        assert math.isclose(p.alpha, particle_alpha(250, 500))
