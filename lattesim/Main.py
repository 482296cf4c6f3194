import logging

from lattesim.Settings import Settings
from lattesim.flow.fluid import FluidFlow, FluidStats, Splat
from lattesim.pour import MilkBudget, PourSource
from lattesim.utils import PerformanceTimer


class Main():
    """Runs the simulation from a pour source, one update() per tick."""

    def __init__(self, settings: Settings, source: PourSource, report_interval: int = 120) -> None:
        self.settings: Settings = settings
        self.source: PourSource = source

        self.fluid = FluidFlow(settings.fluid)
        self.budget = MilkBudget(settings.pour)
        self.step_timer = PerformanceTimer("FluidFlow step", sample_count=report_interval)

        self.report_interval: int = report_interval
        self.tick_count: int = 0
        self.splat_count: int = 0
        self.is_running: bool = False

    def start(self) -> None:
        self.fluid.allocate()
        self.is_running = True
        logging.info(f"Main: started at {self.fluid.resolution}x{self.fluid.resolution}")

    def stop(self) -> None:
        if not self.is_running:
            return
        self.is_running = False
        self.fluid.deallocate()
        logging.info(f"Main: stopped after {self.tick_count} ticks, {self.splat_count} splats")

    def reset(self) -> None:
        self.fluid.clear()
        self.budget.reset()

    def update(self) -> None:
        """One tick: reset request, budget gate, injections, simulation step."""
        if not self.is_running:
            raise RuntimeError("Main is not running, call start() first")

        if self.source.reset_requested():
            logging.info("Main: reset requested")
            self.reset()

        dt: float = self.source.timestep()
        splats: list[Splat] = self.source.poll()
        if splats and self.budget.consume(dt, self.source.flow_scale()):
            for splat in splats:
                self.fluid.inject(splat)
            self.splat_count += len(splats)

        with self.step_timer.measure():
            self.fluid.step(dt)

        self.tick_count += 1
        if self.tick_count % self.report_interval == 0:
            logging.info(f"Main: tick {self.tick_count} {self.stats()} milk={self.budget.used01:.0%}")

    def stats(self) -> FluidStats:
        return self.fluid.stats()
