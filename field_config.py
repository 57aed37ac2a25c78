# field_config.py

import math
import logging

logger = logging.getLogger("particle_field")

# (attribute, page key, default, type, minimum, maximum)
# A bound of None means the option is unbounded on that side.
_OPTIONS = [
    ('circle_count',           'circleCount',          10,    int,   1,    None),
    ('base_speed',             'baseSpeed',            0.1,   float, 0.0,  None),
    ('range_speed',            'rangeSpeed',           0.5,   float, 0.0,  None),
    ('base_radius',            'baseRadius',           1.0,   float, 0.05, None),
    ('range_radius',           'rangeRadius',          4.0,   float, 0.0,  None),
    ('base_ttl',               'baseTTL',              500,   int,   1,    None),
    ('range_ttl',              'rangeTTL',             300,   int,   0,    None),
    ('center_bias',            'centerBias',           0.6,   float, 0.0,  1.0),
    ('blur_amount',            'blurAmount',           12.0,  float, 0.0,  None),
    ('connection_distance',    'connectionDistance',   250.0, float, 0.0,  None),
    ('initial_delay',          'initialDelay',         300.0, float, 0.0,  None),
    ('parallax_strength',      'parallaxStrength',     0.2,   float, None, None),
    ('burst_duration',         'burstDuration',        0.0,   float, 0.0,  None),
    ('burst_speed_multiplier', 'burstSpeedMultiplier', 3.0,   float, 1.0,  None),
    ('burst_base_radius',      'burstBaseRadius',      3.0,   float, 0.05, None),
    ('burst_range_radius',     'burstRangeRadius',     6.0,   float, 0.0,  None),
    ('base_hue',               'baseHue',              220.0, float, None, None),
    ('range_hue',              'rangeHue',             60.0,  float, 0.0,  None),
    ('hue_drift',              'hueDrift',             0.1,   float, None, None),
]

_BACKGROUND_KEYS = ('backgroundColor', 'background_color')
_DEFAULT_BACKGROUND = (0, 0, 0, 0)


def _coerce(value, kind):
    """Converts a number or numeric text to a finite `kind`. Raises ValueError/TypeError."""
    if isinstance(value, bool):
        raise TypeError("booleans are not numeric options")
    if isinstance(value, str):
        value = value.strip()
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"non-finite value {value}")
    if kind is int:
        return int(value)
    return value


def _clamp(value, minimum, maximum):
    if minimum is not None and value < minimum:
        return minimum
    if maximum is not None and value > maximum:
        return maximum
    return value


def _coerce_color(value):
    """Accepts an RGB or RGBA sequence of numbers (or numeric text)."""
    channels = [int(_clamp(_coerce(c, int), 0, 255)) for c in value]
    if len(channels) == 3:
        channels.append(255)
    if len(channels) != 4:
        raise ValueError(f"expected 3 or 4 channels, got {len(channels)}")
    return tuple(channels)


class FieldConfig:
    """
    Recognised options of the particle field, after coercion and clamping.

    Data Contract:
    - Inputs: options (dict) - keys in camelCase ("circleCount") or snake_case
      ("circle_count"); values may be numbers or numeric text.
    - Outputs: an object with one snake_case attribute per option.
    - Side Effects: logs a warning for unknown keys and for values that
      cannot be coerced.
    - Invariants: never raises on bad option values. Counts and sizes are
      clamped to safe minimums, invalid values fall back to the default.
    """
    def __init__(self, options=None):
        options = dict(options or {})
        known = set(_BACKGROUND_KEYS)

        for attr, key, default, kind, minimum, maximum in _OPTIONS:
            known.update((attr, key))
            raw = options.get(key, options.get(attr, default))
            try:
                value = _coerce(raw, kind)
            except (TypeError, ValueError, OverflowError):
                logger.warning(f"Option '{key}' has invalid value {raw!r}; using default {default}.")
                value = kind(default)
            clamped = _clamp(value, minimum, maximum)
            if clamped != value:
                logger.warning(f"Option '{key}'={value} out of range; clamped to {clamped}.")
            setattr(self, attr, clamped)

        raw_color = next((options[k] for k in _BACKGROUND_KEYS if k in options), _DEFAULT_BACKGROUND)
        try:
            self.background_color = _coerce_color(raw_color)
        except (TypeError, ValueError, OverflowError):
            logger.warning(f"Option 'backgroundColor' has invalid value {raw_color!r}; using transparent.")
            self.background_color = _DEFAULT_BACKGROUND

        for key in options:
            if key not in known:
                logger.warning(f"Ignoring unknown particle field option '{key}'.")

    @classmethod
    def from_dict(cls, options):
        if isinstance(options, cls):
            return options
        return cls(options)

    @property
    def burst_enabled(self):
        return self.burst_duration > 0

    def as_dict(self):
        """Returns the effective options keyed by their page (camelCase) names."""
        values = {key: getattr(self, attr) for attr, key, *_ in _OPTIONS}
        values['backgroundColor'] = self.background_color
        return values

    def __repr__(self):
        return f"FieldConfig({self.as_dict()})"
