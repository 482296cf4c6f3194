"""Advect kernel - Semi-Lagrangian advection with dissipation.

Backtrace:  x' = x - velocity(x) * timestep * (width, height)
Velocity is in UV units per second, so a velocity of 1.0 crosses the full grid
in one second. Samples are bilinear with edge clamping, which keeps the pass
stable for any timestep at the cost of some blurring.
"""

import numpy as np

from lattesim.field import Field
from .Kernel import Kernel


class Advect(Kernel):
    """Semi-Lagrangian advection kernel with dissipation."""

    def __init__(self) -> None:
        super().__init__()

    def use(self, source: Field, velocity: Field, out: Field, timestep: float,
            dissipation: float = 1.0, zero: float = 0.0,
            clamp: tuple[float, float] | None = None) -> None:
        """Apply advection.

        Args:
            source: Field to advect (velocity or dye)
            velocity: Velocity field (RG), may be the same field as source
            out: Write field, same format as source
            timestep: Delta time in seconds
            dissipation: Multiplier applied after transport (1.0 = none)
            zero: Values with magnitude below this are set to 0
            clamp: Optional (min, max) range for the result
        """
        self._check([source, velocity], [out])

        vel: np.ndarray = velocity.data
        x: np.ndarray = np.clip(self._xs - vel[..., 0] * (timestep * self.width), 0.0, self.width - 1)
        y: np.ndarray = np.clip(self._ys - vel[..., 1] * (timestep * self.height), 0.0, self.height - 1)

        result: np.ndarray = self.sample(source.data, x, y)

        if dissipation != 1.0:
            result *= dissipation
        if zero > 0.0:
            result[np.abs(result) < zero] = 0.0
        if clamp is not None:
            np.clip(result, clamp[0], clamp[1], out=result)

        out.data[...] = result

    @staticmethod
    def sample(data: np.ndarray, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        """Bilinear sample of data at cell coordinates already clamped to the grid."""
        height, width = data.shape[:2]
        x0: np.ndarray = np.floor(x).astype(np.intp)
        y0: np.ndarray = np.floor(y).astype(np.intp)
        x1: np.ndarray = np.minimum(x0 + 1, width - 1)
        y1: np.ndarray = np.minimum(y0 + 1, height - 1)
        fx: np.ndarray = (x - x0)[..., None]
        fy: np.ndarray = (y - y0)[..., None]

        bottom: np.ndarray = data[y0, x0] * (1.0 - fx) + data[y0, x1] * fx
        top: np.ndarray = data[y1, x0] * (1.0 - fx) + data[y1, x1] * fx
        return (bottom * (1.0 - fy) + top * fy).astype(np.float32)
