"""Map pitcher pose measurements onto brush parameters."""

from lattesim.pour.PourConfig import PourConfig


def _inverse_lerp(a: float, b: float, value: float) -> float:
    if a == b:
        return 0.0
    return min(1.0, max(0.0, (value - a) / (b - a)))


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def flow_scale_from_tilt(config: PourConfig, tilt_deg: float) -> float:
    """Amount scale for a tilt angle, ramping from min_flow_scale to max_flow_scale."""
    start: float = min(config.flow_start_angle, config.flow_max_angle)
    end: float = max(config.flow_start_angle, config.flow_max_angle)
    if tilt_deg <= start:
        t = 0.0
    elif tilt_deg >= end:
        t = 1.0
    else:
        t = _inverse_lerp(start, end, tilt_deg)
    return _lerp(config.min_flow_scale, config.max_flow_scale, t)


def radius_from_height(config: PourConfig, distance: float) -> float:
    """Brush radius for a spout height, radius_far at ray_length and radius_near at 0."""
    d: float = min(max(distance, 0.0), config.ray_length)
    t: float = _inverse_lerp(config.ray_length, 0.0, d)
    return _lerp(config.radius_far, config.radius_near, t)
