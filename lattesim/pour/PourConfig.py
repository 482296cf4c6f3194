from dataclasses import dataclass

from lattesim.ConfigBase import ConfigBase, config_field


@dataclass
class PourConfig(ConfigBase):
    """Configuration for pour input adapters and the milk budget."""

    # Stroke
    spacing: float = config_field(
        0.25, min=0.05, max=1.0,
        description="Distance between sub-splats as a fraction of brush radius, lower is denser"
    )

    # Milk budget
    milk_capacity: float = config_field(
        1.0, min=0.0, max=10.0,
        description="Total milk per cup in arbitrary units, 0 disables the budget"
    )
    milk_per_second: float = config_field(
        0.25, min=0.0, max=5.0,
        description="Milk used per second of pouring at flow scale 1.0"
    )
    infinite_pour: bool = config_field(
        False, description="Ignore the milk budget"
    )

    # Tilt -> flow
    flow_start_angle: float = config_field(
        45.0, min=0.0, max=180.0,
        description="Tilt in degrees where flow starts ramping up"
    )
    flow_max_angle: float = config_field(
        80.0, min=0.0, max=180.0,
        description="Tilt in degrees where flow reaches its maximum"
    )
    min_flow_scale: float = config_field(
        0.2, min=0.0, max=1.0,
        description="Amount scale at the start angle"
    )
    max_flow_scale: float = config_field(
        1.0, min=0.0, max=2.0,
        description="Amount scale at the max angle"
    )

    # Height -> radius
    radius_near: float = config_field(
        0.10, min=0.01, max=0.3,
        description="Brush radius in UV when the spout touches the surface"
    )
    radius_far: float = config_field(
        0.04, min=0.005, max=0.3,
        description="Brush radius in UV at ray_length above the surface"
    )
    ray_length: float = config_field(
        0.35, min=0.01, max=2.0,
        description="Maximum spout height in meters"
    )
