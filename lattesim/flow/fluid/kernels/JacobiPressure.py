"""JacobiPressure kernel - Iterative Poisson pressure solver."""

import numpy as np

from lattesim.field import Field
from lattesim.flow.FlowUtil import FlowUtil
from .Kernel import Kernel


class JacobiPressure(Kernel):
    """One Jacobi relaxation pass for laplacian(p) = divergence.

    p_new = (p_left + p_right + p_down + p_up + alpha * divergence) / beta
    """

    ALPHA: float = -1.0
    BETA: float = 4.0

    def __init__(self) -> None:
        super().__init__()

    def use(self, source: Field, divergence: Field, out: Field, zero: float = 0.0) -> None:
        """Apply one Jacobi iteration.

        Args:
            source: Previous pressure estimate (R)
            divergence: Velocity divergence (R)
            out: Pressure write field (R)
            zero: Pressure magnitudes below this are set to 0
        """
        self._check([source, divergence], [out])

        left, right, down, up = FlowUtil.neighbours(source.data)
        np.multiply(left + right + down + up + self.ALPHA * divergence.data, 1.0 / self.BETA, out=out.data)
        if zero > 0.0:
            out.data[np.abs(out.data) < zero] = 0.0
