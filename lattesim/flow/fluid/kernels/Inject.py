"""Inject kernel - radial dye deposit and velocity impulse (a splat)."""

import numpy as np

from lattesim.field import Field
from .Kernel import Kernel


class Inject(Kernel):
    """Deposit dye and add a force impulse inside a soft-edged disc.

    mask = 1 - smoothstep(radius * (1 - hardness), radius, distance), 0 beyond radius
    dye      -> dye + (1 - dye) * mask * amount
    velocity -> velocity + force * mask
    """

    MIN_EDGE_WIDTH: float = 1e-6

    def __init__(self) -> None:
        super().__init__()

    def use(self, velocity: Field, dye: Field, velocity_out: Field, dye_out: Field,
            uv: tuple[float, float], radius: float, hardness: float, amount: float,
            force: tuple[float, float]) -> None:
        """Apply one splat.

        Args:
            velocity: Current velocity field (RG)
            dye: Current dye field (RGBA)
            velocity_out: Velocity write field
            dye_out: Dye write field
            uv: Splat centre in UV space
            radius: Splat radius in UV units, > 0
            hardness: 0..1
            amount: 0..1, blend weight toward full deposit at the centre
            force: Velocity impulse at the centre (UV/sec)
        """
        self._check([velocity, dye], [velocity_out, dye_out])

        mask: np.ndarray = self.mask(uv, radius, hardness)

        np.add(velocity.data, np.asarray(force, dtype=np.float32) * mask[..., None], out=velocity_out.data)
        weight: np.ndarray = (mask * amount)[..., None]
        np.add(dye.data, (1.0 - dye.data) * weight, out=dye_out.data)

    def mask(self, uv: tuple[float, float], radius: float, hardness: float) -> np.ndarray:
        """Falloff mask of shape (height, width)."""
        u: np.ndarray = (self._xs + 0.5) / self.width
        v: np.ndarray = (self._ys + 0.5) / self.height
        distance: np.ndarray = np.hypot(u - uv[0], v - uv[1])

        inner: float = radius * (1.0 - hardness)
        edge: float = max(radius - inner, self.MIN_EDGE_WIDTH)
        t: np.ndarray = np.clip((distance - inner) / edge, 0.0, 1.0)
        mask: np.ndarray = 1.0 - t * t * (3.0 - 2.0 * t)
        return np.where(distance > radius, 0.0, mask).astype(np.float32)
