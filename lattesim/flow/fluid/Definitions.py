from dataclasses import dataclass


# Lower bound for the splat radius in UV units
MIN_SPLAT_RADIUS: float = 5e-4
# Lower bound for the simulation timestep in seconds
MIN_TIMESTEP: float = 1e-4
# Dye above this level counts as covered in FluidStats
COVERAGE_THRESHOLD: float = 0.01


@dataclass(frozen=True)
class Splat:
    """A single deposit event.

    Unset radius, hardness and amount fall back to the simulation defaults.
    Force is in UV units per second, before the simulation force scale.
    """
    uv: tuple[float, float]
    radius: float | None = None
    hardness: float | None = None
    amount: float | None = None
    force: tuple[float, float] = (0.0, 0.0)


@dataclass(frozen=True)
class FluidStats:
    resolution: int
    dye_max: float
    dye_mean: float
    dye_coverage: float
    velocity_max: float
    divergence: float

    def __str__(self) -> str:
        return (f"res={self.resolution} dye max={self.dye_max:.3f} mean={self.dye_mean:.4f} "
                f"coverage={self.dye_coverage:.1%} vel max={self.velocity_max:.3f} div={self.divergence:.2e}")
