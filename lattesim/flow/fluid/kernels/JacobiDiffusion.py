"""JacobiDiffusion kernel - Iterative implicit diffusion for velocity viscosity."""

import numpy as np

from lattesim.field import Field
from lattesim.flow.FlowUtil import FlowUtil
from .Kernel import Kernel


class JacobiDiffusion(Kernel):
    """Jacobi iterative solver for diffusion (viscosity)."""

    def __init__(self) -> None:
        super().__init__()

    def use(self, source: Field, initial: Field, out: Field, viscosity_dt: float) -> None:
        """Apply one Jacobi iteration for diffusion.

        Args:
            source: Previous iteration of the field to diffuse (velocity RG)
            initial: Field state before the first iteration
            out: Write field
            viscosity_dt: Viscosity * delta_time in UV^2 (diffusion rate)
        """
        self._check([source, initial], [out])

        # grid spacing is one cell in UV, 1/width by 1/height
        alpha_x: float = float(self.width * self.width)
        alpha_y: float = float(self.height * self.height)

        # central coefficient 1/(nu * dt)
        gamma: float = 1.0 / max(viscosity_dt, 1e-6)
        beta: float = 1.0 / (2.0 * alpha_x + 2.0 * alpha_y + gamma)

        left, right, down, up = FlowUtil.neighbours(source.data)
        blended: np.ndarray = gamma * initial.data + alpha_x * (left + right) + alpha_y * (down + up)
        np.multiply(blended, beta, out=out.data)
