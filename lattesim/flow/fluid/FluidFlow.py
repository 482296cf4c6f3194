"""Fluid Flow - 2D stable fluids simulation with an advected dye field.

Implements velocity, pressure, divergence and dye fields with:
- Splat injection (dye deposit + velocity impulse)
- Viscosity diffusion
- Pressure projection (incompressibility)
- Semi-Lagrangian advection
- Dye dissipation
"""
import logging
import math
from dataclasses import dataclass

import numpy as np

from lattesim.ConfigBase import ConfigBase, config_field
from lattesim.field import Field, FieldFormat, SwapField
from .. import FlowBase, FlowUtil
from .Definitions import Splat, FluidStats, MIN_SPLAT_RADIUS, MIN_TIMESTEP, COVERAGE_THRESHOLD
from .kernels import Inject, Advect, Divergence, JacobiPressure, Gradient, JacobiDiffusion, Border


@dataclass
class FluidFlowConfig(ConfigBase):
    """Configuration for fluid simulation."""

    # Grid
    resolution: int = config_field(
        256, min=16, max=2048,
        description="Grid cells per side, changing it reallocates and clears the simulation"
    )
    timestep: float = config_field(
        1.0 / 60.0, min=MIN_TIMESTEP, max=0.1,
        description="Default delta time in seconds when step() is called without one"
    )

    # Velocity parameters
    viscosity: float = config_field(
        0.0005, min=0.0, max=0.01,
        description="Velocity diffusion in UV^2/sec, lower is livelier"
    )
    vel_diffuse_iterations: int = config_field(
        10, min=0, max=60, label="Viscosity Iterations",
        description="Jacobi passes for velocity diffusion (0 disables)"
    )

    # Pressure parameters
    prs_iterations: int = config_field(
        40, min=0, max=200, label="Pressure Iterations",
        description="Jacobi passes per step, higher is more incompressible (0 skips projection)"
    )
    prs_zero: float = config_field(
        1e-6, min=0.0, max=0.01, label="Pressure Zero",
        description="Pressure magnitudes below this are snapped to 0"
    )
    boundary: bool = config_field(
        True, description="Zero velocity and pressure on the outer ring of cells"
    )

    # Dye parameters
    dye_dissipation: float = config_field(
        0.3, min=0.0, max=10.0,
        description="Dye fade per second"
    )
    dye_zero: float = config_field(
        0.0005, min=0.0, max=0.01, label="Dye Zero",
        description="Dye below this is snapped to 0 to kill numerical speckle"
    )

    # Splat defaults
    splat_radius: float = config_field(
        0.06, min=MIN_SPLAT_RADIUS, max=0.5,
        description="Default splat radius in UV units"
    )
    splat_hardness: float = config_field(
        0.85, min=0.0, max=1.0,
        description="Default splat hardness"
    )
    splat_amount: float = config_field(
        0.25, min=0.0, max=1.0,
        description="Default splat amount"
    )
    splat_force_scale: float = config_field(
        4.0, min=0.0, max=20.0,
        description="Multiplier on incoming splat force"
    )
    force_max: float = config_field(
        2.0, min=0.0, max=20.0, label="Force Ceiling",
        description="Incoming force magnitude ceiling in UV/sec, applied before scaling"
    )


class FluidFlow(FlowBase):
    """2D stable fluids simulation.

    Inherits from FlowBase:
        - _input_field -> velocity field (RG32F)
        - _output_field -> dye field (RGBA32F)

    Additional fields:
        - pressure (R32F)
        - divergence (R32F)

    Step pipeline:
        1. Diffuse velocity (if enabled)
        2. Compute divergence
        3. Solve for pressure (Jacobi iterations)
        4. Subtract pressure gradient (make divergence-free)
        5. Advect velocity by itself
        6. Zero velocity and pressure borders (if enabled)
        7. Advect and dissipate dye
    """

    def __init__(self, config: FluidFlowConfig | None = None) -> None:
        super().__init__()

        self.config: FluidFlowConfig = config or FluidFlowConfig()

        # Define formats for FlowBase
        self._input_format = FieldFormat.RG32F      # Velocity (inherited as _input_field)
        self._output_format = FieldFormat.RGBA32F   # Dye (inherited as _output_field)

        # Additional simulation fields
        self._pressure_field: SwapField = SwapField()
        self._divergence_field: SwapField = SwapField()

        # Scratch fields, never exposed
        self._velocity_initial_field: Field = Field()
        self._residual_field: Field = Field()

        self._resolution: int = 0

        # Kernels
        self._inject_kernel: Inject = Inject()
        self._advect_kernel: Advect = Advect()
        self._divergence_kernel: Divergence = Divergence()
        self._jacobi_pressure_kernel: JacobiPressure = JacobiPressure()
        self._gradient_kernel: Gradient = Gradient()
        self._jacobi_diffusion_kernel: JacobiDiffusion = JacobiDiffusion()
        self._border_kernel: Border = Border()

        self._unwatch = self.config.watch(self._on_resolution_changed, 'resolution')

    # ========== Properties (Domain-specific API) ==========

    @property
    def resolution(self) -> int:
        return self._resolution

    @property
    def velocity(self) -> np.ndarray:
        """RG velocity field (read-only, invalidated by the next step or inject)."""
        return self._input.view()

    @property
    def dye(self) -> np.ndarray:
        """RGBA dye field (read-only, invalidated by the next step or inject)."""
        return self._output.view()

    @property
    def pressure(self) -> np.ndarray:
        """R pressure field (read-only)."""
        return self._pressure_field.read.view()

    @property
    def divergence(self) -> np.ndarray:
        """R divergence field from the last projection (read-only)."""
        return self._divergence_field.read.view()

    # ========== Allocation ==========

    def allocate(self, resolution: int | None = None) -> None: # type: ignore[override]
        """Allocate all simulation fields, cleared to zero.

        Args:
            resolution: Grid cells per side (defaults to config.resolution)

        Raises:
            ValueError: If the resolution is not positive.
        """
        res: int = int(resolution if resolution is not None else self.config.resolution)
        self._allocated = False
        if res <= 0:
            raise ValueError(f"FluidFlow resolution must be positive, got {res}")

        super().allocate(res, res)

        self._pressure_field.allocate(res, res, FieldFormat.R32F)
        FlowUtil.zero(self._pressure_field)

        self._divergence_field.allocate(res, res, FieldFormat.R32F)
        FlowUtil.zero(self._divergence_field)

        self._velocity_initial_field.allocate(res, res, FieldFormat.RG32F)
        self._residual_field.allocate(res, res, FieldFormat.R32F)

        for kernel in self._kernels():
            kernel.allocate(res, res)

        self._resolution = res
        logging.info(f"FluidFlow: allocated {res}x{res}")

    def deallocate(self) -> None:
        """Release all field resources."""
        super().deallocate()
        self._pressure_field.deallocate()
        self._divergence_field.deallocate()
        self._velocity_initial_field.deallocate()
        self._residual_field.deallocate()
        for kernel in self._kernels():
            kernel.deallocate()
        self._resolution = 0

    def clear(self) -> None:
        """Reset all simulation fields to zero without reallocating."""
        super().clear()
        FlowUtil.zero(self._pressure_field)
        FlowUtil.zero(self._divergence_field)
        logging.debug("FluidFlow: cleared")

    def _kernels(self) -> list:
        return [
            self._inject_kernel,
            self._advect_kernel,
            self._divergence_kernel,
            self._jacobi_pressure_kernel,
            self._gradient_kernel,
            self._jacobi_diffusion_kernel,
            self._border_kernel,
        ]

    def _on_resolution_changed(self, resolution: int) -> None:
        if self._allocated and resolution != self._resolution:
            logging.info(f"FluidFlow: resolution changed {self._resolution} -> {resolution}, reallocating")
            self.allocate(resolution)

    def _require_allocated(self) -> None:
        if not self._allocated:
            raise RuntimeError("FluidFlow is not allocated, call allocate() first")

    # ========== Input Methods ==========

    # ----- Splats -----
    def inject(self, splat: Splat) -> None:
        """Deposit dye and push velocity around a UV position.

        Parameters are sanitised rather than rejected: a splat never raises.
        """
        self._require_allocated()

        u, v = (float(c) for c in splat.uv)
        if not (math.isfinite(u) and math.isfinite(v)):
            logging.debug(f"FluidFlow: dropped splat with non-finite uv {splat.uv}")
            return

        radius: float = self._resolve(splat.radius, self.config.splat_radius)
        if radius <= 0.0:
            radius = self.config.splat_radius
        radius = max(MIN_SPLAT_RADIUS, radius)
        hardness: float = min(1.0, max(0.0, self._resolve(splat.hardness, self.config.splat_hardness)))
        amount: float = min(1.0, max(0.0, self._resolve(splat.amount, self.config.splat_amount)))
        force: tuple[float, float] = self._limit_force(splat.force)

        self._inject_kernel.use(
            self._input_field.read,
            self._output_field.read,
            self._input_field.write,
            self._output_field.write,
            (u, v), radius, hardness, amount, force
        )
        self._input_field.swap()
        self._output_field.swap()

    def inject_uv(self, uv: tuple[float, float], radius: float | None = None, hardness: float | None = None,
                  amount: float | None = None, force: tuple[float, float] | None = None) -> None:
        """Convenience wrapper around inject()."""
        self.inject(Splat(uv, radius, hardness, amount, force if force is not None else (0.0, 0.0)))

    @staticmethod
    def _resolve(value: float | None, default: float) -> float:
        if value is None or not math.isfinite(value):
            return float(default)
        return float(value)

    def _limit_force(self, force: tuple[float, float]) -> tuple[float, float]:
        """Clamp force magnitude to force_max, keep direction, then apply the force scale."""
        fx, fy = (float(c) if math.isfinite(c) else 0.0 for c in force)
        magnitude: float = math.hypot(fx, fy)
        ceiling: float = max(0.0, self.config.force_max)
        if magnitude > ceiling and magnitude > 1e-12:
            fx, fy = fx / magnitude * ceiling, fy / magnitude * ceiling
        scale: float = self.config.splat_force_scale
        return (fx * scale, fy * scale)

    # ----- Velocity -----
    def set_velocity(self, velocity: np.ndarray, strength: float = 1.0) -> None:
        """Set velocity field from an array of shape (resolution, resolution, 2)."""
        self._require_allocated()
        FlowUtil.set(self._input_field, velocity, strength)

    def add_velocity(self, velocity: np.ndarray, strength: float = 1.0) -> None:
        """Add to velocity field."""
        self._require_allocated()
        FlowUtil.add(self._input_field, velocity, strength)

    # ----- Dye -----
    def set_dye(self, dye: np.ndarray) -> None:
        """Set dye field from an array of shape (resolution, resolution, 4), clamped to [0, 1]."""
        self._require_allocated()
        FlowUtil.set(self._output_field, dye)
        self.clamp_dye()

    def fill_dye(self, value: float) -> None:
        """Fill the whole dye field with one level."""
        self._require_allocated()
        self._output_field.write.clear(min(1.0, max(0.0, value)))
        self._output_field.swap()

    def clamp_dye(self, min_value: float = 0.0, max_value: float = 1.0) -> None:
        """Clamp dye values to a specified range."""
        self._require_allocated()
        FlowUtil.clamp(self._output_field, min_value, max_value)

    # ========== Step Pipeline ==========

    def step(self, delta_time: float | None = None) -> None:
        """Advance the simulation one tick.

        Args:
            delta_time: Time step in seconds (defaults to config.timestep)
        """
        self._require_allocated()

        dt: float = max(MIN_TIMESTEP, float(delta_time if delta_time is not None else self.config.timestep))
        config: FluidFlowConfig = self.config

        # ===== STEP 1: VELOCITY DIFFUSE (viscosity) =====
        if config.viscosity > 0.0 and config.vel_diffuse_iterations > 0:
            FlowUtil.copy(self._velocity_initial_field, self._input_field.read)
            viscosity_dt: float = config.viscosity * dt
            for _ in range(config.vel_diffuse_iterations):
                self._jacobi_diffusion_kernel.use(
                    self._input_field.read,
                    self._velocity_initial_field,
                    self._input_field.write,
                    viscosity_dt
                )
                self._input_field.swap()

        # ===== STEP 2-4: PRESSURE PROJECTION (make divergence-free) =====
        if config.prs_iterations > 0:
            # 2. Compute divergence
            self._divergence_kernel.use(self._input_field.read, self._divergence_field.write)
            self._divergence_field.swap()

            # 3. Solve Poisson equation for pressure, from zero
            FlowUtil.zero(self._pressure_field)
            for _ in range(config.prs_iterations):
                self._jacobi_pressure_kernel.use(
                    self._pressure_field.read,
                    self._divergence_field.read,
                    self._pressure_field.write,
                    config.prs_zero
                )
                self._pressure_field.swap()

            # 4. Subtract pressure gradient from velocity
            self._gradient_kernel.use(
                self._input_field.read,
                self._pressure_field.read,
                self._input_field.write
            )
            self._input_field.swap()

        # ===== STEP 5: VELOCITY ADVECT =====
        self._advect_kernel.use(
            self._input_field.read,     # Source velocity (self-advection)
            self._input_field.read,     # Velocity
            self._input_field.write,
            dt
        )
        self._input_field.swap()

        # ===== STEP 6: BORDERS =====
        if config.boundary:
            self._border_kernel.use(self._input_field.read, self._input_field.write)
            self._input_field.swap()
            self._border_kernel.use(self._pressure_field.read, self._pressure_field.write)
            self._pressure_field.swap()

        # ===== STEP 7: DYE ADVECT & DISSIPATE =====
        self._advect_kernel.use(
            self._output_field.read,    # Source dye
            self._input_field.read,     # Velocity
            self._output_field.write,
            dt,
            FluidFlow._calculate_dissipation(dt, config.dye_dissipation),
            config.dye_zero,
            (0.0, 1.0)
        )
        self._output_field.swap()

    # ========== Diagnostics ==========

    def stats(self) -> FluidStats:
        """Summary of the current fields; leaves the simulated fields untouched."""
        self._require_allocated()

        dye: np.ndarray = self._output.data[..., 0]
        speed: np.ndarray = FlowUtil.magnitude(self._input.data)

        self._divergence_kernel.use(self._input, self._residual_field)
        divergence: float = Divergence.total(self._residual_field) / dye.size

        return FluidStats(
            resolution=self._resolution,
            dye_max=float(np.max(dye)),
            dye_mean=float(np.mean(dye)),
            dye_coverage=float(np.count_nonzero(dye > COVERAGE_THRESHOLD)) / dye.size,
            velocity_max=float(np.max(speed)),
            divergence=divergence,
        )

    @staticmethod
    def _calculate_dissipation(delta_time: float, rate: float) -> float:
        """Dye multiplier for one step.

        Args:
            delta_time: Step time in seconds
            rate: Fraction of dye lost per second

        Returns:
            Multiplier in [0, 1] (e.g. 0.995 = 0.5% loss this step)
        """
        return max(0.0, 1.0 - rate * delta_time)
