"""Gradient kernel - Subtract pressure gradient from velocity."""

import numpy as np

from lattesim.field import Field
from lattesim.flow.FlowUtil import FlowUtil
from .Kernel import Kernel


class Gradient(Kernel):
    """Subtract pressure gradient from velocity (projection step)."""

    def __init__(self) -> None:
        super().__init__()

    def use(self, velocity: Field, pressure: Field, out: Field) -> None:
        """Apply pressure gradient subtraction.

        Args:
            velocity: Current velocity field (RG)
            pressure: Pressure field (R)
            out: Velocity write field (RG)
        """
        self._check([velocity, pressure], [out])

        left, right, down, up = FlowUtil.neighbours(pressure.data)
        gradient: np.ndarray = 0.5 * np.concatenate((right - left, up - down), axis=-1)
        np.subtract(velocity.data, gradient, out=out.data)
