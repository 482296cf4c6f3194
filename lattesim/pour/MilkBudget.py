import logging

from lattesim.pour.PourConfig import PourConfig


class MilkBudget:
    """Limited milk volume per cup, drained while pouring."""

    def __init__(self, config: PourConfig) -> None:
        self.config: PourConfig = config
        self._used: float = 0.0

    @property
    def used(self) -> float:
        return self._used

    @property
    def used01(self) -> float:
        """Used fraction in [0, 1] for UI."""
        capacity: float = self.config.milk_capacity
        if capacity <= 0.0:
            return 0.0
        return min(1.0, max(0.0, self._used / capacity))

    @property
    def out_of_milk(self) -> bool:
        capacity: float = self.config.milk_capacity
        return capacity > 0.0 and self._used >= capacity

    def consume(self, delta_time: float, flow_scale: float = 1.0) -> bool:
        """Account for delta_time seconds of pouring.

        Returns:
            True if pouring may continue this tick.
        """
        if self.config.infinite_pour or self.config.milk_capacity <= 0.0:
            return True
        if self.out_of_milk:
            return False

        self._used += self.config.milk_per_second * flow_scale * delta_time
        if self._used >= self.config.milk_capacity:
            self._used = self.config.milk_capacity
            logging.info("MilkBudget: out of milk")
            return False
        return True

    def reset(self) -> None:
        self._used = 0.0
