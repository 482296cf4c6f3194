import math
from dataclasses import dataclass

from lattesim.flow.fluid import Splat
from lattesim.pour.PourConfig import PourConfig
from lattesim.pour.PourSource import PourSource
from lattesim.pour.PourStroke import PourStroke
from lattesim.pour.Shaping import flow_scale_from_tilt, radius_from_height


@dataclass(frozen=True)
class PourSample:
    """Contact point at a moment in time. uv None lifts the stroke."""
    time: float
    uv: tuple[float, float] | None
    tilt: float | None = None
    height: float | None = None


class ScriptedPour(PourSource):
    """Replays timestamped pour samples on a fixed clock.

    Each poll advances the clock by one timestep and feeds every sample that
    became due through a PourStroke.
    """

    def __init__(self, samples: list[PourSample], timestep: float, config: PourConfig,
                 radius: float, hardness: float, amount: float) -> None:
        self.config: PourConfig = config
        self.radius: float = radius
        self.hardness: float = hardness
        self.amount: float = amount

        self._samples: list[PourSample] = sorted(samples, key=lambda s: s.time)
        self._timestep: float = timestep
        self._stroke: PourStroke = PourStroke(config.spacing)
        self._clock: float = 0.0
        self._index: int = 0
        self._flow_scale: float = 1.0
        self._reset_requested: bool = False

    @property
    def finished(self) -> bool:
        return self._index >= len(self._samples)

    @property
    def pouring(self) -> bool:
        return self._stroke.active

    def poll(self) -> list[Splat]:
        self._clock += self._timestep
        splats: list[Splat] = []
        while self._index < len(self._samples) and self._samples[self._index].time <= self._clock:
            splats.extend(self._feed(self._samples[self._index]))
            self._index += 1
        return splats

    def _feed(self, sample: PourSample) -> list[Splat]:
        if sample.uv is None:
            self._stroke.end()
            self._flow_scale = 1.0
            return []

        radius: float = self.radius
        if sample.height is not None:
            radius = radius_from_height(self.config, sample.height)

        self._flow_scale = 1.0
        if sample.tilt is not None:
            self._flow_scale = flow_scale_from_tilt(self.config, sample.tilt)

        amount: float = self.amount * self._flow_scale
        return self._stroke.move(sample.uv, sample.time, radius, self.hardness, amount)

    def timestep(self) -> float:
        return self._timestep

    def flow_scale(self) -> float:
        return self._flow_scale

    def request_reset(self) -> None:
        self._reset_requested = True

    def reset_requested(self) -> bool:
        requested: bool = self._reset_requested
        self._reset_requested = False
        return requested

    def rewind(self) -> None:
        self._stroke.end()
        self._clock = 0.0
        self._index = 0
        self._flow_scale = 1.0

    # ========== Patterns ==========

    @staticmethod
    def line(start: tuple[float, float], end: tuple[float, float], duration: float, timestep: float,
             config: PourConfig, radius: float, hardness: float, amount: float) -> 'ScriptedPour':
        """Straight pour from start to end, one sample per tick, lifted at the end."""
        count: int = max(1, int(round(duration / timestep)))
        samples: list[PourSample] = []
        for i in range(count + 1):
            t: float = i / count
            uv = (start[0] + (end[0] - start[0]) * t, start[1] + (end[1] - start[1]) * t)
            samples.append(PourSample(i * timestep, uv))
        samples.append(PourSample((count + 1) * timestep, None))
        return ScriptedPour(samples, timestep, config, radius, hardness, amount)

    @staticmethod
    def circle(center: tuple[float, float], circle_radius: float, turns: float, duration: float, timestep: float,
               config: PourConfig, radius: float, hardness: float, amount: float) -> 'ScriptedPour':
        """Circular pour around center, lifted at the end."""
        count: int = max(1, int(round(duration / timestep)))
        samples: list[PourSample] = []
        for i in range(count + 1):
            angle: float = 2.0 * math.pi * turns * i / count
            uv = (center[0] + circle_radius * math.cos(angle), center[1] + circle_radius * math.sin(angle))
            samples.append(PourSample(i * timestep, uv))
        samples.append(PourSample((count + 1) * timestep, None))
        return ScriptedPour(samples, timestep, config, radius, hardness, amount)
