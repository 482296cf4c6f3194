"""Divergence kernel - Compute divergence of velocity field."""

import numpy as np

from lattesim.field import Field
from lattesim.flow.FlowUtil import FlowUtil
from .Kernel import Kernel


class Divergence(Kernel):
    """Compute velocity field divergence: (R.x - L.x + U.y - D.y) / 2."""

    def __init__(self) -> None:
        super().__init__()

    def use(self, velocity: Field, out: Field) -> None:
        """Compute divergence.

        Args:
            velocity: Velocity field (RG)
            out: Divergence write field (R)
        """
        self._check([velocity], [out])

        left, right, down, up = FlowUtil.neighbours(velocity.data)
        out.data[..., 0] = 0.5 * (right[..., 0] - left[..., 0] + up[..., 1] - down[..., 1])

    @staticmethod
    def total(divergence: Field) -> float:
        """Sum of absolute divergence over the grid."""
        return float(np.sum(np.abs(divergence.data)))
