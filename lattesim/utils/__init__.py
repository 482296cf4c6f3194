from .PerformanceTimer import PerformanceTimer
