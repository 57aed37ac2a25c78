# test_field_config.py

import logging

import pytest

from field_config import FieldConfig


def test_defaults():
    cfg = FieldConfig()
    assert cfg.circle_count == 10
    assert cfg.connection_distance == 250.0
    assert cfg.background_color == (0, 0, 0, 0)
    assert not cfg.burst_enabled


def test_camel_and_snake_case_keys():
    cfg = FieldConfig({'circleCount': 4, 'base_ttl': 20, 'blurAmount': 3})
    assert cfg.circle_count == 4
    assert cfg.base_ttl == 20
    assert cfg.blur_amount == 3.0


def test_numeric_text_is_coerced():
    cfg = FieldConfig({'circleCount': '7', 'baseSpeed': ' 0.25 ', 'baseTTL': '12.9'})
    assert cfg.circle_count == 7
    assert isinstance(cfg.circle_count, int)
    assert cfg.base_speed == 0.25
    assert cfg.base_ttl == 12


def test_non_positive_count_is_clamped():
    assert FieldConfig({'circleCount': 0}).circle_count == 1
    assert FieldConfig({'circleCount': '-3'}).circle_count == 1


def test_center_bias_is_clamped_to_probability():
    assert FieldConfig({'centerBias': 2}).center_bias == 1.0
    assert FieldConfig({'centerBias': -1}).center_bias == 0.0


def test_radius_stays_positive():
    assert FieldConfig({'baseRadius': 0, 'rangeRadius': 0}).base_radius > 0


def test_invalid_value_falls_back_to_default(caplog):
    with caplog.at_level(logging.WARNING, logger="particle_field"):
        cfg = FieldConfig({'circleCount': 'lots', 'connectionDistance': None})
    assert cfg.circle_count == 10
    assert cfg.connection_distance == 250.0
    assert "circleCount" in caplog.text


def test_unknown_option_is_ignored_with_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="particle_field"):
        cfg = FieldConfig({'sparkles': True})
    assert not hasattr(cfg, 'sparkles')
    assert "sparkles" in caplog.text


def test_background_color():
    assert FieldConfig({'backgroundColor': [10, 20, 30]}).background_color == (10, 20, 30, 255)
    assert FieldConfig({'background_color': ['1', 2, 3, 300]}).background_color == (1, 2, 3, 255)
    assert FieldConfig({'backgroundColor': 'teal'}).background_color == (0, 0, 0, 0)


def test_from_dict_passes_instances_through():
    cfg = FieldConfig({'circleCount': 3})
    assert FieldConfig.from_dict(cfg) is cfg
    assert FieldConfig.from_dict({'circleCount': 3}).circle_count == 3


def test_as_dict_uses_page_keys():
    values = FieldConfig({'burstDuration': 500}).as_dict()
    assert values['burstDuration'] == 500.0
    assert values['circleCount'] == 10


@pytest.mark.parametrize("raw", ['inf', '-inf', 'nan', ' NaN ', float('nan'), float('inf'), 10 ** 400])
def test_non_finite_values_fall_back_to_default(raw, caplog):
    with caplog.at_level(logging.WARNING, logger="particle_field"):
        cfg = FieldConfig({'circleCount': raw, 'baseSpeed': raw, 'parallaxStrength': raw})
    assert cfg.circle_count == 10
    assert cfg.base_speed == 0.1
    assert cfg.parallax_strength == 0.2
    assert "circleCount" in caplog.text


def test_non_finite_background_channel_falls_back():
    assert FieldConfig({'backgroundColor': [1, 'inf', 3]}).background_color == (0, 0, 0, 0)


@pytest.mark.parametrize("raw", [0, '0', -2, 0.5])
def test_burst_multiplier_never_slows_ageing(raw):
    assert FieldConfig({'burstSpeedMultiplier': raw}).burst_speed_multiplier == 1.0
