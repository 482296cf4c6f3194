from abc import ABC, abstractmethod

from lattesim.flow.fluid import Splat


class PourSource(ABC):
    """Input device seen by the tick driver.

    Mouse, hand tracking and scripted pours all reduce to this: zero or more
    splats per tick, a timestep and a reset request.
    """

    @abstractmethod
    def poll(self) -> list[Splat]:
        """Splats produced since the previous poll."""
        ...

    @abstractmethod
    def timestep(self) -> float:
        """Delta time for the coming tick in seconds."""
        ...

    def reset_requested(self) -> bool:
        return False

    def flow_scale(self) -> float:
        """Current pour strength, used for milk accounting."""
        return 1.0
