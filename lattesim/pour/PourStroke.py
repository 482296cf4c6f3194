import math

from lattesim.flow.fluid import Splat


class PourStroke:
    """Turns successive contact points into evenly spaced splats.

    The first contact deposits a single splat without force. Following points
    fill the segment from the previous point with sub-splats every
    radius * spacing, splitting the amount between them so the total deposit
    per update stays near `amount`, and push along the stroke velocity.
    """

    MIN_STEP: float = 0.001
    MIN_DELTA_TIME: float = 1e-4

    def __init__(self, spacing: float = 0.25) -> None:
        self.spacing: float = spacing
        self._last_uv: tuple[float, float] | None = None
        self._last_time: float = 0.0

    @property
    def active(self) -> bool:
        return self._last_uv is not None

    def begin(self, uv: tuple[float, float], time: float, radius: float, hardness: float, amount: float) -> list[Splat]:
        self._last_uv = (float(uv[0]), float(uv[1]))
        self._last_time = time
        return [Splat(self._last_uv, radius, hardness, amount, (0.0, 0.0))]

    def move(self, uv: tuple[float, float], time: float, radius: float, hardness: float, amount: float) -> list[Splat]:
        if self._last_uv is None:
            return self.begin(uv, time, radius, hardness, amount)

        prev_u, prev_v = self._last_uv
        u, v = float(uv[0]), float(uv[1])
        dt: float = max(time - self._last_time, self.MIN_DELTA_TIME)

        du, dv = u - prev_u, v - prev_v
        distance: float = math.hypot(du, dv)
        flow: tuple[float, float] = (du / dt, dv / dt) if distance > 1e-6 else (0.0, 0.0)

        step: float = max(self.MIN_STEP, radius * self.spacing)
        steps: int = max(1, math.ceil(distance / step))
        amount_per_step: float = amount / steps

        splats: list[Splat] = []
        for i in range(1, steps + 1):
            t: float = i / steps
            point: tuple[float, float] = (prev_u + du * t, prev_v + dv * t)
            splats.append(Splat(point, radius, hardness, amount_per_step, flow))

        self._last_uv = (u, v)
        self._last_time = time
        return splats

    def end(self) -> None:
        self._last_uv = None
